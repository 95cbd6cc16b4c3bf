#!/usr/bin/env python3
"""
Quick Start Guide for XML Record Stream.

This example walks through the three output modes (buffered, callback and
iterator), configuration, and what happens with broken documents.
"""

import logging
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from xml_record_stream import (
    RecordParserConfig,
    TokenizerError,
    XMLRecordParser,
    get_records,
    iter_records,
    stream_records,
)

CATALOG = """<?xml version="1.0" encoding="UTF-8"?>
<catalog>
  <book id="123" genre="fiction">
    <title>My Book</title>
    <author>John Doe</author>
    <price currency="USD">19.99</price>
  </book>
  <magazine issue="42"/>
  <book id="124">
    <title>Second Book</title>
    <author>Jane Roe</author>
  </book>
</catalog>
"""


def quick_start_example():
    """Quick start example showing the three output modes."""

    print("🚀 QUICK START - XML Record Stream")
    print("=" * 40)

    # Step 1: Buffered mode
    print("\n📦 Step 1: Collect every record")
    print("-" * 30)

    records = get_records(CATALOG, ["book", "magazine"])
    for tag, values in records.items():
        print(f"  {tag}: {values}")

    # Step 2: Callback mode
    print("\n📨 Step 2: Stream records to a callback")
    print("-" * 30)

    def handle(value):
        print(f"  ✅ received {value}")

    stream_records(CATALOG, ["book"], handle)

    # Step 3: Iterator mode
    print("\n🔁 Step 3: Pull records lazily")
    print("-" * 30)

    for record in iter_records(CATALOG, ["book", "magazine"]):
        print(f"  <{record.tag}> -> {record.value}")
        if record.tag == "magazine":
            print("  ⏹️  Stopping early, the rest of the input is never read")
            break


def configuration_example():
    """Example showing a configured parser and its statistics."""

    print("\n\n⚙️  CONFIGURATION EXAMPLE")
    print("=" * 40)

    config = RecordParserConfig(tags=("book",), chunk_size=16)
    print(f"📋 Config: {config.to_dict()}")

    parser = XMLRecordParser(CATALOG, config=config, correlation_id="quick-start")
    parser.get()

    stats = parser.statistics
    print(f"\n📊 Run Statistics:")
    print(f"  Chunks: {stats.chunks_processed}")
    print(f"  Events: {stats.events_processed}")
    print(f"  Records: {stats.records_emitted}")
    print(f"  Max depth: {stats.max_depth}")
    print(f"  Time: {stats.processing_time_ms:.2f} ms")


def broken_documents_example():
    """Example showing truncated and malformed input."""

    print("\n\n🩹 BROKEN DOCUMENTS EXAMPLE")
    print("=" * 40)

    truncated = "<catalog><book><title>Kept</title></book><book><title>Lost"
    print(f"\n✂️  Truncated: {get_records(truncated, ['book'])}")

    strict = RecordParserConfig(tags=("book",), validate_document_end=True)
    try:
        get_records(truncated, config=strict)
    except TokenizerError as e:
        print(f"  ❌ With validate_document_end: {e}")

    malformed = "<catalog><book>One</book><book>Two</oops></catalog>"
    delivered = []
    try:
        stream_records(malformed, ["book"], delivered.append)
    except TokenizerError as e:
        print(f"\n💥 Malformed: {e}")
        print(f"  Delivered before the error: {delivered}")


def main():
    """Main function."""
    logging.basicConfig(level=logging.WARNING)
    try:
        quick_start_example()
        configuration_example()
        broken_documents_example()

        print(f"\n✅ All examples completed successfully!")
        return 0

    except Exception as e:
        print(f"\n❌ Example failed: {e}")
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())

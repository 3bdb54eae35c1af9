#!/usr/bin/env python3
"""
Example usage of the excel2csv library.
"""

from pathlib import Path

from excel2csv import ConverterConfig, ExcelFormatter, ExcelToCsvConverter, FormatError


def main():
    """Demonstrate the format engine and the converter."""

    # Example 1: Applying format codes directly
    print("=== Example 1: Format Codes ===")
    samples = [
        (1234567.891, "#,##0.00"),
        (123, "\\{###\\}"),
        (5, '0.00;(0.00);"-"'),
        (-5, '0.00;(0.00);"-"'),
        (0, '0.00;(0.00);"-"'),
        (0.125, "0.0%"),
        (1234.5, "[$€-407]#,##0.00"),
        ("Bob", '0;-0;0;"Name: "@'),
    ]
    for value, code in samples:
        print(f"  {value!r:>14} | {code:<22} -> {ExcelFormatter.format_value(value, code)!r}")
    print()

    # Example 2: Malformed codes raise, callers fall back to the raw value
    print("=== Example 2: Fallback ===")
    try:
        ExcelFormatter.format_value(1.0, '"unterminated')
    except FormatError as e:
        print(f"  {e}")
        print(f"  fallback: {ExcelFormatter.general(1.0)}")
    print()

    # Example 3: Converting a workbook
    print("=== Example 3: Workbook Conversion ===")
    excel_file = "example_data.xlsx"

    if Path(excel_file).exists():
        config = ConverterConfig(
            output_format="tsv",   # comma, tab or semicolon separated
            empty_value="",        # text for empty cells
        )
        converter = ExcelToCsvConverter(config)
        try:
            content = converter.convert_to_csv(excel_file, sheet="0")
            print(content[:200] + "..." if len(content) > 200 else content)
        except ValueError as e:
            print(f"Error: {e}")
    else:
        print(f"Please provide {excel_file} to run this example")


if __name__ == "__main__":
    main()

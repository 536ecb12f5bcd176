"""
Basic usage example for UN Contributions Extract.
"""

import os
import sys
from pathlib import Path

# Add the parent directory to the Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

from uncontrib import Config, classify_all_pdfs, export_to_csv, parse_all_pdfs


def main():
    """
    Basic usage example.
    """
    # Create output directory if it doesn't exist
    os.makedirs("./out", exist_ok=True)

    cfg = Config()
    cfg.input.pdf_dir = "./reports"
    cfg.output.classification_path = "./out/pdf_layouts.csv"

    try:
        # Catalogue the layouts first
        for result in classify_all_pdfs(cfg):
            print(f"{result['filename']}: {result['layout']}")

        result = parse_all_pdfs(cfg)
        print(f"Extracted {len(result.records)} records from {result.processed_count} files")

        for outcome in result.errors:
            print(f"  {outcome.filename}: {outcome.error}")

        path = export_to_csv(result.records, "./out/un_contributions.csv", cfg)
        if path:
            print(f"Wrote CSV to {path}")

        # Personnel per country in the most recent month
        if result.records:
            latest = max((r["year"], r["month"]) for r in result.records)
            totals = {}
            for record in result.records:
                if (record["year"], record["month"]) == latest:
                    totals[record["country"]] = totals.get(record["country"], 0) + record["total"]
            print(f"\nTop contributors {latest[0]}-{latest[1]:02d}:")
            for country, total in sorted(totals.items(), key=lambda item: -item[1])[:10]:
                print(f"  {country}: {total}")

    except FileNotFoundError as e:
        print(f"Error: {e}")
        print("Please place UN_country_contributions_YYYY_MM.pdf files in the ./reports directory")


if __name__ == "__main__":
    main()

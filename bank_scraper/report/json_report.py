# bank_scraper/report/json_report.py

"""
Dataset output for BankScraper.

The whole dataset is written once, at the end of a crawl, as a single UTF-8
JSON document ``{"summary": {...}, "data": [...]}``.
"""
import json
import os
from pathlib import Path

from bank_scraper.aggregator import CrawlReport


def render_json(report: CrawlReport, output_path: Path | str) -> Path:
    """
    Save *report* as pretty-printed JSON at the given path.

    The document goes to a ``.part`` sibling first and is then moved over
    the target, so an existing dataset is never left half-written.

    :param report: CrawlReport with summary and records
    :param output_path: path of the JSON file
    :return: Path of the saved file

    Example:
    ```python
    from bank_scraper.report.json_report import render_json
    path = render_json(report, 'standardbank_dataset.json')
    print(f"Dataset saved to: {path}")
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    partial = output.with_name(output.name + '.part')

    try:
        with partial.open('w', encoding='utf-8') as f:
            json.dump(report.to_dict(), f, ensure_ascii=False, indent=2)
        os.replace(partial, output)
    finally:
        partial.unlink(missing_ok=True)

    return output

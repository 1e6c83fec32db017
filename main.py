# main.py
import argparse
import json
import logging
import sys

from analytics_service import AnalyticsService
from config import AnalyticsConfig, validate_config
from errors import AnalyticsError, CorpusUnavailableError
from statistics_aggregator import CORPUS_ORDER, REVELATION_ORDER, order_timeline


def run_query(service: AnalyticsService, root: str, revelation: bool = False, verses: bool = False) -> dict:
    result = service.get_root_analytics(root)
    payload = result.to_dict(include_verses=verses, chapters=service.corpus.chapters)
    order = REVELATION_ORDER if revelation else CORPUS_ORDER
    payload["timeline"] = [e.to_dict() for e in order_timeline(result.statistics.timeline, order)]
    return payload


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Analytical profile of a Quranic root")
    parser.add_argument("root", help="root to analyse, e.g. رحم")
    parser.add_argument("--revelation", action="store_true", help="timeline in revelation order")
    parser.add_argument("--verses", action="store_true", help="include the occurrence list")
    args = parser.parse_args(argv)

    # 1. التجهيز: الإعدادات ثم تحميل المدونة مرة واحدة
    try:
        config = AnalyticsConfig.from_env()
        logging.basicConfig(
            level=config.log_level,
            format='%(asctime)s - %(levelname)s - %(message)s'
        )
        validate_config(config)
        service = AnalyticsService.from_config(config)
    except (CorpusUnavailableError, FileNotFoundError, ValueError) as e:
        logging.getLogger(__name__).error(f"❌ Cannot start: {e}")
        return 1

    # 2. الاستعلام
    with service:
        try:
            payload = run_query(service, args.root, args.revelation, args.verses)
        except AnalyticsError as e:
            print(f"⚠️ {e}", file=sys.stderr)
            return 2

    print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())

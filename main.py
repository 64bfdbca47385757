"""Command-line entry point for dupefinder.

Loads environment variables, reads search results from a JSON or YAML file,
runs duplicate detection and prints the clusters and per-indexer unique hits.
"""
from dotenv import load_dotenv
import argparse
import json
import os
import sys

# Load environment variables first, before any other imports
load_dotenv()

parser = argparse.ArgumentParser(description="Group search results from several indexers into duplicate clusters.")
parser.add_argument('input', type=str, help='JSON or YAML file with search results.')
parser.add_argument('--age-threshold', type=float, help='Max publish age difference in hours.')
parser.add_argument('--size-threshold', type=float, help='Max size difference in percent of the average size.')
parser.add_argument('--trace', action='store_true', help='Log every pairwise comparison.')
parser.add_argument('--json', dest='as_json', action='store_true', help='Print the full result as JSON.')
parser.add_argument('--log-level', type=str, help='Logging level (DEBUG, INFO, ...).')

args = parser.parse_args()

# Apply parsed arguments to environment variables
if args.age_threshold is not None:
    os.environ['DUPLICATE_AGE_THRESHOLD'] = str(args.age_threshold)
if args.size_threshold is not None:
    os.environ['DUPLICATE_SIZE_THRESHOLD_IN_PERCENT'] = str(args.size_threshold)
if args.trace:
    os.environ['DEDUP_TRACE_COMPARISONS'] = 'true'
    os.environ.setdefault('LOG_LEVEL', 'DEBUG')
if args.log_level is not None:
    os.environ['LOG_LEVEL'] = args.log_level

from pydantic import ValidationError

from dupefinder.config import get_config
from dupefinder.dedup import DuplicateDetector, Thresholds
from dupefinder.loader import ResultsFileError, load_results
from dupefinder.performance import (
    get_performance_metrics,
    get_performance_recommendations,
    log_configuration_performance,
    log_performance_summary,
    summarize,
)
from dupefinder.utils.logger import configure_logging, log_error, log_info

# Load and validate configuration
try:
    config = get_config()
except ValidationError as e:
    print(f"❌ Invalid configuration:\n{e}")
    sys.exit(1)

configure_logging(config.logging.level, config.logging.format)
config.log_configuration()
log_configuration_performance()

issues = config.validate_configuration()
if issues:
    log_error("Configuration validation failed", issues=issues)
    print("❌ Configuration issues found:")
    for issue in issues:
        print(f"  - {issue}")
    print("\nPlease fix these issues and try again.")
    sys.exit(1)

perf = get_performance_metrics()
perf.start_timer("load_results")
try:
    results = load_results(args.input)
except ResultsFileError as e:
    print(f"❌ {e}")
    sys.exit(1)
perf.end_timer("load_results")

for rec in get_performance_recommendations(len(results)):
    log_info(f"  💡 {rec}")

if not results:
    log_info("No results to process")

detector = DuplicateDetector(Thresholds.from_config(config))
result = detector.detect(results)

if args.as_json:
    print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
else:
    for cluster in result.clusters:
        marker = "=" if len(cluster) > 1 else "-"
        print(f"[{cluster.identifier}] {marker} {len(cluster)} result(s)")
        for item in cluster:
            print(f"      {item.indexer.name:<20} {item.title}")
    print()
    print(f"Clusters: {len(result.clusters)}  Duplicates found: {result.duplicates_detected}")
    for indexer, count in sorted(result.unique_hits_per_indexer.items(), key=lambda kv: kv[0].name):
        print(f"Unique hits for {indexer.name}: {count}")
    print(f"Detection: {summarize(perf.get_operation_stats('duplicate_detection'))}")

log_performance_summary()

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

from dupefinder.dedup import DuplicateDetector, SamenessTester, Thresholds
from dupefinder.loader import load_results

PROJECT_ROOT = Path(__file__).parent.parent.parent


def make_results():
    # Three indexers report the same episode; one also has an unrelated
    # repost from another group, and a fourth result has no size.
    return [
        {"title": "Some.Show.S02E03.720p.WEB", "indexer": "alpha", "pub_date": "2024-05-10T20:00:00Z",
         "size": 850_000_000, "group": "NTb"},
        {"title": "Some Show.S02E03.720p.WEB", "indexer": "beta", "pub_date": "2024-05-10T20:40:00Z",
         "size": 851_000_000},
        {"title": "Some.Show.S02E03.720p.WEB", "indexer": "gamma", "pub_date": "2024-05-10T21:10:00Z",
         "size": 849_500_000, "group": "NTb", "poster": "uploader"},
        {"title": "Some.Show.S02E03.720p.WEB", "indexer": "beta", "pub_date": "2024-05-10T18:00:00Z",
         "size": 900_000_000, "group": "FLUX"},
        {"title": "Another.Film.2023.1080p", "indexer": "alpha", "pub_date": "2024-05-09T10:00:00Z"},
    ]


@pytest.fixture
def results_file(tmp_path):
    f = tmp_path / "results.json"
    f.write_text(json.dumps({"results": make_results()}))
    return f


def test_end_to_end_grouping(results_file):
    items = load_results(results_file)
    detector = DuplicateDetector(tester=SamenessTester(Thresholds(age_hours=2, size_percent=1), trace=False))

    result = detector.detect(items)

    titles_by_cluster = [[(i.indexer.name, i.group) for i in c] for c in result.clusters]
    assert titles_by_cluster == [
        [("gamma", "NTb"), ("beta", None), ("alpha", "NTb")],
        [("beta", "FLUX")],
        [("alpha", None)],
    ]
    assert [item.duplicate_identifier for item in items] == [0, 0, 0, 1, 2]
    assert {k.name: v for k, v in result.unique_hits_per_indexer.items()} == {"beta": 1, "alpha": 1}
    assert result.duplicates_detected == 2


@pytest.mark.integration
def test_cli_json_output(results_file, tmp_path):
    env = {k: v for k, v in os.environ.items() if not k.startswith(("DUPLICATE_", "DEDUP_", "LOG_"))}
    env["METRICS_ENABLED"] = "false"

    proc = subprocess.run(
        [sys.executable, str(PROJECT_ROOT / "main.py"), str(results_file), "--json",
         "--age-threshold", "2", "--size-threshold", "1"],
        cwd=tmp_path,
        env={**env, "PYTHONPATH": str(PROJECT_ROOT)},
        capture_output=True,
        text=True,
        timeout=60,
    )

    assert proc.returncode == 0, proc.stderr
    data = json.loads(proc.stdout)
    assert [len(c["items"]) for c in data["clusters"]] == [3, 1, 1]
    assert data["unique_hits_per_indexer"] == {"beta": 1, "alpha": 1}


@pytest.mark.integration
def test_cli_rejects_bad_input(tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text("[{\"title\": \"missing indexer\"}]")

    proc = subprocess.run(
        [sys.executable, str(PROJECT_ROOT / "main.py"), str(bad)],
        cwd=tmp_path,
        env={**os.environ, "PYTHONPATH": str(PROJECT_ROOT)},
        capture_output=True,
        text=True,
        timeout=60,
    )

    assert proc.returncode == 1
    assert "invalid" in proc.stdout


@pytest.mark.integration
def test_cli_json_output_for_empty_input(tmp_path):
    empty = tmp_path / "empty.json"
    empty.write_text("[]")
    env = {k: v for k, v in os.environ.items() if not k.startswith(("DUPLICATE_", "DEDUP_", "LOG_"))}
    env["METRICS_ENABLED"] = "false"

    proc = subprocess.run(
        [sys.executable, str(PROJECT_ROOT / "main.py"), str(empty), "--json"],
        cwd=tmp_path,
        env={**env, "PYTHONPATH": str(PROJECT_ROOT)},
        capture_output=True,
        text=True,
        timeout=60,
    )

    assert proc.returncode == 0, proc.stderr
    assert json.loads(proc.stdout) == {
        "clusters": [],
        "unique_hits_per_indexer": {},
        "duplicates_detected": 0,
    }

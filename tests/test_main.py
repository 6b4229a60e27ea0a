"""
Tests for the Command-Line Interface

Run with: pytest tests/test_main.py -v
"""

import json

import pytest
import structlog

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from halfplane_voronoi.data_models import VoronoiDiagram
from halfplane_voronoi.main import main
from halfplane_voronoi.synthetic_data import save_sites_to_json, generate_scenario
from halfplane_voronoi.data_models import Point, Polygon


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


class TestMain:
    """End-to-end runs of main()."""

    def test_generate_and_save(self, tmp_path):
        output = tmp_path / "diagram.json"

        code = main(["--num-sites", "6", "--seed", "3", "--quiet", "--output", str(output)])

        assert code == 0
        diagram = VoronoiDiagram.load_from_json(str(output))
        assert diagram.num_sites == 6
        assert len(diagram.cells) == 6

    def test_validate_report(self, capsys):
        code = main(["--num-sites", "10", "--width", "50", "--height", "40", "--validate"])

        assert code == 0
        out = capsys.readouterr().out
        assert "Diagram Summary" in out
        assert "Valid: True" in out

    def test_input_file(self, tmp_path, capsys):
        sites, region = generate_scenario(count=5, width=20, height=20, seed=8)
        path = save_sites_to_json(sites, region, str(tmp_path / "sites.json"))

        code = main(["--input", path, "--verbose"])

        assert code == 0
        assert "Sites:           5" in capsys.readouterr().out

    def test_duplicate_rejected(self, tmp_path):
        path = save_sites_to_json(
            [Point(1, 1), Point(1, 1)], Polygon.rectangle(10, 10), str(tmp_path / "dup.json")
        )

        code = main(["--input", path, "--on-duplicate", "raise", "--quiet"])

        assert code == 1

    def test_non_convex_region_rejected(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({
            "sites": [{"x": 1, "y": 1}],
            "bounding_region": {"vertices": [
                {"x": 0, "y": 0}, {"x": 10, "y": 0}, {"x": 10, "y": 5},
                {"x": 5, "y": 5}, {"x": 5, "y": 10}, {"x": 0, "y": 10}
            ]}
        }))

        assert main(["--input", str(path), "--quiet"]) == 1

    def test_missing_input(self, tmp_path):
        assert main(["--input", str(tmp_path / "missing.json"), "--quiet"]) == 1

    def test_unwritable_output(self, tmp_path, capsys):
        """Test a write failure on --output is reported with exit code 1."""
        output = tmp_path / "no_such_dir" / "diagram.json"

        code = main(["--num-sites", "3", "--seed", "2", "--quiet", "--output", str(output)])

        assert code == 1
        assert "Error:" in capsys.readouterr().err
        assert not output.exists()

    def test_json_log_format(self, tmp_path):
        """Test JSON logging at debug level does not disturb the run."""
        output = tmp_path / "diagram.json"

        code = main(["--num-sites", "4", "--seed", "1", "--quiet",
                     "--log-level", "debug", "--log-format", "json", "--output", str(output)])

        assert code == 0
        assert output.exists()

    def test_unknown_log_level(self):
        """Test argparse rejects an unknown log level."""
        with pytest.raises(SystemExit):
            main(["--log-level", "chatty", "--quiet"])

    def test_benchmark(self, capsys):
        code = main(["--benchmark", "--sizes", "5", "--trials", "1", "--workers", "2"])

        assert code == 0
        assert "Serial(ms)" in capsys.readouterr().out


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

import json

from click.testing import CliRunner

from ops.run_dashboard import cli


def invoke(project_dir, *args):
    return CliRunner().invoke(cli, ["--config-file", str(project_dir / "config.yaml"), *args])


def test_build_writes_all_outputs(project_dir):
    result = invoke(project_dir, "build")
    assert result.exit_code == 0, result.output

    out = project_dir / "out"
    for name in [
        "constituencies_results.geojson",
        "summary.json",
        "summary.csv",
        "seats_by_party.png",
        "overview_map.html",
    ]:
        assert (out / name).exists(), name

    layer = json.loads((out / "constituencies_results.geojson").read_text())
    colors = [f["properties"]["fillColor"] for f in layer["features"]]
    assert colors == ["#e74c3c", "#e74c3c", "#27ae60"]

    summary = json.loads((out / "summary.json").read_text())
    assert summary["totalConstituencies"] == 3
    assert summary["parties"][0]["party"] == "UPND"


def test_build_without_results_still_draws_map(project_dir):
    (project_dir / "data" / "election_results.json").unlink()
    result = invoke(project_dir, "build")
    assert result.exit_code == 0, result.output

    out = project_dir / "out"
    assert (out / "overview_map.html").exists()
    assert not (out / "summary.json").exists()
    layer = json.loads((out / "constituencies_results.geojson").read_text())
    assert {f["properties"]["fillColor"] for f in layer["features"]} == {"#e0e0e0"}


def test_build_without_boundaries_fails(project_dir):
    (project_dir / "data" / "constituencies.geojson").unlink()
    assert invoke(project_dir, "build").exit_code == 1


def test_summary_command(project_dir):
    result = invoke(project_dir, "summary")
    assert result.exit_code == 0
    assert "Total Constituencies: 3" in result.output
    assert "UPND Seats: 2 (66.7% of seats)" in result.output


def test_summary_without_results(project_dir):
    (project_dir / "data" / "election_results.json").unlink()
    result = invoke(project_dir, "summary")
    assert result.exit_code == 0
    assert "No Election Results Available" in result.output


def test_drill_writes_ward_map(project_dir):
    result = invoke(project_dir, "drill", "Lusaka Central", "--json")
    assert result.exit_code == 0, result.output
    assert '"drillDownActive": true' in result.output
    assert (project_dir / "out" / "wards_LUSAKA_CENTRAL.html").exists()


def test_drill_by_number(project_dir):
    assert invoke(project_dir, "drill", "1").exit_code == 0


def test_drill_missing_wards_fails(project_dir):
    result = invoke(project_dir, "drill", "Kabwata")
    assert result.exit_code == 1
    assert not (project_dir / "out" / "wards_KABWATA.html").exists()


def test_drill_unknown_constituency(project_dir):
    assert invoke(project_dir, "drill", "Nowhere").exit_code == 1


def test_legend(project_dir):
    result = invoke(project_dir, "legend")
    assert result.exit_code == 0
    lines = result.stdout.strip().splitlines()
    assert lines[0] == "#e74c3c  UPND"
    assert lines[-1] == "#e0e0e0  No Data"


def test_config_override(project_dir):
    result = invoke(project_dir, "--config", "directories.output=elsewhere", "build")
    assert result.exit_code == 0, result.output
    assert (project_dir / "elsewhere" / "overview_map.html").exists()


def test_bad_override_format(project_dir):
    result = invoke(project_dir, "--config", "no-equals-sign", "legend")
    assert result.exit_code == 2


def test_build_with_undecodable_results_draws_no_data_map(project_dir):
    (project_dir / "data" / "election_results.json").write_bytes(b"\xff\xfe garbage")
    result = invoke(project_dir, "build")
    assert result.exit_code == 0, result.output

    out = project_dir / "out"
    assert (out / "overview_map.html").exists()
    assert not (out / "summary.json").exists()
    layer = json.loads((out / "constituencies_results.geojson").read_text())
    assert {f["properties"]["fillColor"] for f in layer["features"]} == {"#e0e0e0"}

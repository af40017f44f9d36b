import json
import os
import subprocess
import sys

import pytest

ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

MOCK_MT101 = """:20:TEST-2024001
:30:240123
:21:TXN-001
:32B:EUR1000,00
:59:/DK1234567890
COMPANY NAME
:71A:SHA
-
"""


def run_cli(args):
    """Utility to run the swiftmt CLI via subprocess."""
    result = subprocess.run(
        [sys.executable, "-m", "swiftmt"] + args,
        capture_output=True,
        text=True,
        cwd=ROOT_DIR,
    )
    return result


@pytest.fixture
def message_file(tmp_path):
    path = tmp_path / "message.mt101"
    path.write_text(MOCK_MT101, encoding="utf-8")
    return str(path)


def test_cli_validate_success(message_file):
    result = run_cli(["validate", message_file])

    assert result.returncode == 0
    assert "Validation Successful" in result.stdout


def test_cli_validate_failure(tmp_path):
    path = tmp_path / "broken.mt101"
    path.write_text(":20:REF1\n:21:TXN1\n:59:/ACC1\n-\n", encoding="utf-8")

    result = run_cli(["validate", str(path)])

    assert result.returncode == 1
    assert "Validation Failed" in result.stdout
    assert "Line 4:" in result.stdout


def test_cli_parse(message_file):
    result = run_cli(["parse", message_file])

    assert result.returncode == 0
    data = json.loads(result.stdout)
    assert len(data) == 1
    assert data[0]["senders_reference"]["reference"] == "TEST-2024001"
    assert data[0]["transaction_details"][0]["details_of_charges"]["charge_code"] == "SHA"


def test_cli_render(message_file):
    result = run_cli(["render", message_file])

    assert result.returncode == 0
    assert result.stdout == MOCK_MT101


def test_cli_lenient_parse(tmp_path):
    path = tmp_path / "lenient.mt101"
    path.write_text(":21:TXN1\n:32B:EUR1,\n:59:/A\n-\n", encoding="utf-8")

    strict = run_cli(["parse", str(path)])
    lenient = run_cli(["--lenient", "parse", str(path)])

    assert strict.returncode == 1
    assert "Error parsing file" in strict.stderr
    assert lenient.returncode == 0
    assert json.loads(lenient.stdout)[0]["senders_reference"]["reference"] == ""


def test_cli_missing_file(tmp_path):
    result = run_cli(["parse", str(tmp_path / "missing.mt101")])

    assert result.returncode == 1
    assert "Error parsing file" in result.stderr


def test_cli_invalid_command():
    result = run_cli(["garbage"])

    assert result.returncode != 0
    assert "invalid choice" in result.stderr

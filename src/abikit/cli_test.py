"""Tests for cli.py"""

from __future__ import annotations

import json

import pytest

from .cli import describe_encode_type, describe_error, main, parse_arguments
from .logs import close_logging

ERC20_ABI = [
    {
        "type": "function",
        "name": "transfer",
        "inputs": [{"name": "to", "type": "address"}, {"name": "amount", "type": "uint256"}],
        "outputs": [{"name": "", "type": "bool"}],
        "stateMutability": "nonpayable",
    },
    {
        "type": "event",
        "name": "Transfer",
        "inputs": [
            {"name": "from", "type": "address", "indexed": True},
            {"name": "to", "type": "address", "indexed": True},
            {"name": "value", "type": "uint256", "indexed": False},
        ],
        "anonymous": False,
    },
    {"type": "error", "name": "InvalidToken", "inputs": []},
]

MAIL = "Mail(Person from,Person to,string contents)Person(string name,address wallet)"


def run_main(argv: list[str]) -> int:
    """Run the cli with the dotenv file given first and detach its log handlers afterwards."""
    dotenv_file, *command = argv
    try:
        return main(["--dotenv-file", dotenv_file, *command])
    finally:
        close_logging()


@pytest.fixture(name="quiet_logging")
def fixture_quiet_logging(clean_root_logger, monkeypatch, tmp_path):  # pylint: disable=unused-argument
    """Point the cli at a missing dotenv file and send its logs to ``tmp_path / "abikit.log"``."""
    monkeypatch.setenv("ABIKIT_LOG_STDOUT", "false")
    monkeypatch.setenv("ABIKIT_LOG_FILENAME", str(tmp_path / "abikit.log"))
    monkeypatch.delenv("ABIKIT_ABI_DIR", raising=False)
    monkeypatch.delenv("ABIKIT_LOG_LEVEL", raising=False)
    return str(tmp_path / "missing.env")


class TestParseArguments:
    """Tests for cli.py::parse_arguments()."""

    def test_eip712_primary(self):
        """The eip712 command takes an optional primary type."""
        args = parse_arguments(["eip712", MAIL, "--primary", "Person"])
        assert args.command == "eip712"
        assert args.target == MAIL
        assert args.primary == "Person"
        assert args.dotenv_file == "abikit.env"

    def test_error_has_no_primary(self):
        """Commands without --primary report None."""
        args = parse_arguments(["--dotenv-file", "local.env", "error", "Oops()"])
        assert args.command == "error"
        assert args.primary is None
        assert args.dotenv_file == "local.env"

    def test_command_required(self):
        """Running without a command is a usage error."""
        with pytest.raises(SystemExit):
            parse_arguments([])


class TestDescribe:
    """Tests for the describe_* helpers."""

    def test_describe_error(self):
        """An error signature is reported with its canonical signature and selector."""
        described = describe_error("CustomError(uint256 amount,bool flag)")
        assert described["signature"] == "CustomError(uint256,bool)"
        assert described["selector"].to_0x_hex() == "0x659c1f59"

    def test_describe_encode_type(self):
        """The primary type defaults to the first definition."""
        described = describe_encode_type(MAIL)
        assert described["primaryType"] == "Mail"
        assert described["encodeType"] == MAIL
        assert [component["name"] for component in described["types"]] == ["Mail", "Person"]
        assert (
            described["typeHash"].to_0x_hex()
            == "0xa0cedeb2dc280ba39b857546d74f5549c3a1d7bdc2dd96bf881f76108e23dac2"
        )

    def test_describe_encode_type_other_primary(self):
        """A dependency can be picked as primary type."""
        described = describe_encode_type(MAIL, "Person")
        assert described["encodeType"] == "Person(string name,address wallet)"


class TestMain:
    """Tests for cli.py::main()."""

    def test_abi(self, quiet_logging, tmp_path, capsys):
        """Every function, event and error is listed with its selector."""
        abi_path = tmp_path / "ERC20.json"
        abi_path.write_text(json.dumps({"abi": ERC20_ABI}))
        assert run_main([quiet_logging, "abi", str(abi_path)]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines == [
            "function transfer(address,uint256) 0xa9059cbb",
            "event Transfer(address,address,uint256) "
            "0xddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef",
            "error InvalidToken() 0xc1ab6dc1",
        ]

    def test_error(self, quiet_logging, capsys):
        """The parsed error is printed as JSON."""
        assert run_main([quiet_logging, "error", "Myerror(uint256 a,(address,uint256) arg2)"]) == 0
        output = json.loads(capsys.readouterr().out)
        assert output["signature"] == "Myerror(uint256,(address,uint256))"
        assert output["item"]["type"] == "error"
        assert [param["name"] for param in output["item"]["inputs"]] == ["a", "arg2"]
        assert output["item"]["inputs"][1]["type"] == "tuple"

    def test_eip712(self, quiet_logging, capsys):
        """Property types are rendered as their type strings."""
        assert run_main([quiet_logging, "eip712", MAIL]) == 0
        output = json.loads(capsys.readouterr().out)
        assert output["types"][0]["properties"][0] == {"type": "Person", "name": "from"}
        assert output["encodeType"] == MAIL

    def test_parse_failure(self, quiet_logging, tmp_path, capsys):
        """A malformed signature exits with status 1 and logs the failure."""
        assert run_main([quiet_logging, "error", "Myerror(uint256)"]) == 1
        assert capsys.readouterr().out == ""
        with open(tmp_path / "abikit.log", "r", encoding="utf-8") as log_file:
            assert "Failed to parse" in log_file.read()

    def test_missing_file(self, quiet_logging, tmp_path):
        """A missing ABI file exits with status 1."""
        assert run_main([quiet_logging, "abi", str(tmp_path / "nope.json")]) == 1

    def test_invalid_log_level(self, clean_root_logger, monkeypatch, tmp_path, capsys):  # pylint: disable=unused-argument
        """A bad configuration exits with status 1 and logs why instead of raising."""
        monkeypatch.setenv("ABIKIT_LOG_LEVEL", "LOUD")
        monkeypatch.delenv("ABIKIT_LOG_STDOUT", raising=False)
        monkeypatch.delenv("ABIKIT_LOG_FILENAME", raising=False)
        assert run_main([str(tmp_path / "missing.env"), "error", "Oops()"]) == 1
        output = capsys.readouterr().out
        assert "Invalid configuration" in output
        assert "LOUD" in output

    def test_eip712_without_definitions(self, quiet_logging):
        """An encodeType string without any definition is a failure."""
        assert run_main([quiet_logging, "eip712", "not a struct"]) == 1

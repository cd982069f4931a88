"""Command line access to abikit's parsers.

    abikit abi ./out/ERC20.json
    abikit error "InsufficientBalance(uint256 available,uint256 required)"
    abikit eip712 "Mail(Person from,Person to,string contents)Person(string name,address wallet)"
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, NamedTuple, Sequence

from abikit.config import AbikitConfig, build_abikit_config
from abikit.eip712 import EncodeType, Resolver
from abikit.errors import AbiParseError
from abikit.json_abi import Error, JsonAbi, load_abi
from abikit.json_encoder import AbiJSONEncoder
from abikit.logs import setup_logging


def describe_abi(abi: JsonAbi) -> list[str]:
    """List the signature and selector of every function, event and error.

    Arguments
    ---------
    abi: JsonAbi
        The ABI to describe.

    Returns
    -------
    list[str]
        One ``kind signature selector`` line per item.
    """
    lines = []
    for group in (abi.functions, abi.events, abi.errors):
        for overloads in group.values():
            for item in overloads:
                lines.append(f"{item.kind} {item.signature()} {item.selector().to_0x_hex()}")
    return lines


def describe_error(signature_text: str) -> dict[str, Any]:
    """Parse a free-text error signature.

    Arguments
    ---------
    signature_text: str
        E.g. ``Myerror(uint256 a,(address,uint256) arg2)``.

    Returns
    -------
    dict[str, Any]
        The JSON ABI item, its canonical signature and its selector.
    """
    error = Error.parse(signature_text)
    return {"item": error, "signature": error.signature(), "selector": error.selector()}


def describe_encode_type(encode_type_text: str, primary_type: str | None = None) -> dict[str, Any]:
    """Parse an EIP-712 encodeType string and canonicalize it for a primary type.

    Arguments
    ---------
    encode_type_text: str
        The concatenated struct definitions.
    primary_type: str, optional
        The struct being signed. Defaults to the first definition.

    Returns
    -------
    dict[str, Any]
        The definitions as parsed, the primary type, the canonical encodeType and its hash.
    """
    encode_type = EncodeType.parse(encode_type_text)
    if encode_type.primary_type is None:
        raise AbiParseError(f"no struct definition found in {encode_type_text!r}")
    if primary_type is None:
        primary_type = encode_type.primary_type.type_name
    resolver = Resolver.from_encode_type(encode_type)
    return {
        "types": [
            {"name": component.type_name, "properties": [{"type": prop.ty, "name": prop.name} for prop in component.props]}
            for component in encode_type
        ],
        "primaryType": primary_type,
        "encodeType": resolver.encode_type(primary_type),
        "typeHash": resolver.type_hash(primary_type),
    }


def run(args: Args, config: AbikitConfig) -> str:
    """Run one command and render its output.

    Arguments
    ---------
    args: Args
        The parsed command line.
    config: AbikitConfig
        The configuration.

    Returns
    -------
    str
        The text to print.
    """
    if args.command == "abi":
        abi_path = config.resolve_abi_path(args.target)
        logging.debug("Reading ABI from %s", abi_path)
        return "\n".join(describe_abi(load_abi(abi_path)))
    if args.command == "error":
        return json.dumps(describe_error(args.target), cls=AbiJSONEncoder, indent=2)
    if args.command == "eip712":
        return json.dumps(describe_encode_type(args.target, args.primary), cls=AbiJSONEncoder, indent=2)
    raise ValueError(f"Unknown command {args.command}")


def main(argv: Sequence[str] | None = None) -> int:
    """Parse the command line, run the command and print its output.

    Arguments
    ---------
    argv: Sequence[str] | None
        The arguments, without the program name. Defaults to sys.argv[1:].

    Returns
    -------
    int
        The exit status: 0 on success, 1 if the configuration is invalid or the input could not be read or parsed.
    """
    args = parse_arguments(argv)
    try:
        config = build_abikit_config(args.dotenv_file)
    except ValueError as exc:
        # Log with the defaults, since the configuration is what failed
        setup_logging()
        logging.error("Invalid configuration: %s", exc)
        return 1
    setup_logging(log_filename=config.log_filename, log_level=config.log_level, log_stdout=config.log_stdout)
    try:
        output = run(args, config)
    # Report bad input without a traceback
    except (AbiParseError, OSError, json.JSONDecodeError) as exc:
        logging.error("Failed to parse %r: %s", args.target, exc)
        return 1
    print(output)
    return 0


class Args(NamedTuple):
    """Command line arguments for abikit."""

    command: str
    target: str
    primary: str | None
    dotenv_file: str


def namespace_to_args(namespace: argparse.Namespace) -> Args:
    """Converts argprase.Namespace to Args.

    Arguments
    ---------
    namespace: argparse.Namespace
        Object for storing arg attributes.

    Returns
    -------
    Args
        Formatted arguments
    """
    return Args(
        command=namespace.command,
        target=namespace.target,
        primary=getattr(namespace, "primary", None),
        dotenv_file=namespace.dotenv_file,
    )


def parse_arguments(argv: Sequence[str] | None = None) -> Args:
    """Parses input arguments.

    Arguments
    ---------
    argv: Sequence[str]
        The argv values returned from argparser.

    Returns
    -------
    Args
        Formatted arguments
    """
    parser = argparse.ArgumentParser(description="Parse contract ABIs and EIP-712 types and derive their selectors.")
    parser.add_argument(
        "--dotenv-file",
        type=str,
        default="abikit.env",
        help="The dotenv file to load configuration from. Defaults to abikit.env.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    abi_parser = subparsers.add_parser("abi", help="List the signatures and selectors of an ABI file.")
    abi_parser.add_argument("target", type=str, help="A JSON ABI file or a compiler artifact with an `abi` field.")

    error_parser = subparsers.add_parser("error", help="Parse an error signature such as `Name(uint256 a)`.")
    error_parser.add_argument("target", type=str, help="The error signature.")

    eip712_parser = subparsers.add_parser("eip712", help="Parse and canonicalize an EIP-712 encodeType string.")
    eip712_parser.add_argument("target", type=str, help="The encodeType string.")
    eip712_parser.add_argument(
        "--primary",
        type=str,
        default=None,
        help="The primary type. Defaults to the first struct definition.",
    )

    return namespace_to_args(parser.parse_args(argv))


def cli() -> None:
    """Console script entrypoint."""
    sys.exit(main())


if __name__ == "__main__":
    cli()

"""
spvmerkle CLI - build trees, print paths and proofs, verify proofs.

Main entry point for all CLI commands.
"""

import json
import logging
from typing import List, Optional, Tuple

import click

from spvmerkle.utils.logger import setup_logging, get_logger

logger = get_logger("cli")


def _decode_values(values: Tuple[str, ...], as_hex: bool) -> List[bytes]:
    """Leaf values from the command line, UTF-8 text or hex."""
    from spvmerkle.crypto import hex_to_bytes

    if not as_hex:
        return [v.encode("utf-8") for v in values]
    try:
        return [hex_to_bytes(v) for v in values]
    except ValueError as e:
        raise click.BadParameter(f"invalid hex value: {e}", param_hint="VALUES") from None


def _decode_digest(value: str, name: str) -> bytes:
    from spvmerkle.crypto import DIGEST_SIZE, hex_to_bytes
    from spvmerkle.utils.validation import validate_hex_string

    valid, err = validate_hex_string(value, name, DIGEST_SIZE)
    if not valid:
        raise click.BadParameter(err, param_hint=name)
    return hex_to_bytes(value)


def _build_tree(ctx, values: Tuple[str, ...], as_hex: bool):
    """Load and build a tree from the configured parameters."""
    from spvmerkle.core.errors import MerkleTreeError

    config = ctx.obj["config"]
    tree = config.create_tree(name="cli")
    try:
        tree.load_leaves(_decode_values(values, as_hex))
        tree.build()
    except MerkleTreeError as e:
        raise click.ClickException(str(e))
    return tree


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--env-file", default=None, type=click.Path(dir_okay=False), help=".env file with SPVMERKLE_* settings")
@click.option("--depth", type=int, default=None, help="Tree depth (1-32)")
@click.option("--hasher", default=None, help="Hash primitive: sha256, keccak256, poseidon")
@click.option("--pad/--no-pad", default=None, help="Pad non power-of-two leaf counts")
@click.version_option(version="0.1.0")
@click.pass_context
def cli(ctx, debug, env_file, depth, hasher, pad):
    """spvmerkle - fixed-depth Merkle trees with SPV proofs"""
    from dataclasses import replace
    from spvmerkle.core.config import load_config

    try:
        config = load_config(env_file)
        overrides = {}
        if depth is not None:
            overrides["depth"] = depth
        if hasher is not None:
            overrides["hasher"] = hasher
        if pad is not None:
            overrides["pad_leaves"] = pad
        if overrides:
            config = replace(config, **overrides)
    except ValueError as e:
        raise click.ClickException(str(e))

    level = logging.DEBUG if debug else config.log_level_value
    setup_logging(level=level)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    logger.debug(f"Using {config}")


# =============================================================================
# Tree Commands
# =============================================================================

@cli.command("root")
@click.argument("values", nargs=-1)
@click.option("--hex", "as_hex", is_flag=True, help="Values are hex encoded")
@click.pass_context
def root(ctx, values, as_hex):
    """Print the root of a tree built from VALUES"""
    from spvmerkle.crypto import bytes_to_hex

    tree = _build_tree(ctx, values, as_hex)
    click.echo(bytes_to_hex(tree.root))


@cli.command("path")
@click.argument("index", type=int)
@click.argument("values", nargs=-1, required=True)
@click.option("--hex", "as_hex", is_flag=True, help="Values are hex encoded")
@click.pass_context
def path(ctx, index, values, as_hex):
    """Print the hash path of leaf INDEX, bottom level first"""
    from spvmerkle.core.errors import LeafIndexError

    tree = _build_tree(ctx, values, as_hex)
    try:
        hash_path = tree.hash_path(index)
    except LeafIndexError as e:
        raise click.ClickException(str(e))

    for level, (left, right) in enumerate(hash_path.to_hex()):
        click.echo(f"{level:>2}  {left}  {right}")


@cli.command("prove")
@click.argument("index", type=int)
@click.argument("values", nargs=-1, required=True)
@click.option("--hex", "as_hex", is_flag=True, help="Values are hex encoded")
@click.pass_context
def prove(ctx, index, values, as_hex):
    """Print the SPV proof of leaf INDEX as JSON"""
    from spvmerkle.core.errors import LeafIndexError
    from spvmerkle.crypto import bytes_to_hex

    tree = _build_tree(ctx, values, as_hex)
    try:
        proof = tree.generate_proof(index)
    except LeafIndexError as e:
        raise click.ClickException(str(e))

    click.echo(json.dumps({
        "index": index,
        "root": bytes_to_hex(tree.root),
        "proof": [bytes_to_hex(p) for p in proof],
    }, indent=2))


@cli.command("verify")
@click.argument("index", type=int)
@click.argument("root_hex", metavar="ROOT")
@click.argument("proof_hex", nargs=-1, required=True, metavar="PROOF...")
@click.pass_context
def verify(ctx, index, root_hex, proof_hex):
    """Recompute the root from PROOF; exit 1 if it is not ROOT"""
    from spvmerkle.core.merkle import verify_proof
    from spvmerkle.crypto import bytes_to_hex

    config = ctx.obj["config"]
    expected = _decode_digest(root_hex, "ROOT")
    proof = [_decode_digest(p, f"PROOF[{i}]") for i, p in enumerate(proof_hex)]

    try:
        computed = verify_proof(index, proof, expected, config.make_hasher())
    except ValueError as e:
        raise click.ClickException(str(e))

    click.echo(bytes_to_hex(computed))
    if computed != expected:
        click.echo("✗ Proof does not match root", err=True)
        ctx.exit(1)
    click.echo("✓ Proof valid", err=True)


@cli.command("bench")
@click.option("--scale", type=float, default=1.0, help="Multiply iteration counts")
def bench(scale: float):
    """Run the benchmark suite"""
    from spvmerkle.utils.benchmark import run_all_benchmarks

    run_all_benchmarks(scale)


def main(argv: Optional[List[str]] = None):
    cli(args=argv)


if __name__ == "__main__":
    main()

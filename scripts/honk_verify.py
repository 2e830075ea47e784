#!/usr/bin/env python3
"""
Verify an UltraHonk proof stored on disk.

    honk_verify.py --vk vk.bin --proof proof.bin [--public-inputs inputs]

The public-inputs file is either raw concatenated 32-byte words or text with one
hex value per line. Exit status: 0 accepted, 1 rejected, 2 malformed input.
"""

from __future__ import annotations

import argparse
import logging
import pathlib
import re
import sys

ROOT = pathlib.Path(__file__).resolve().parents[1]  # repo root (flat modules)
sys.path.insert(0, str(ROOT))

from errors import (  # noqa: E402
    InvalidFieldElement,
    InvalidProofFormat,
    InvalidPublicInputFormat,
    InvalidPublicInputsLength,
    InvalidVerificationKey,
    VerifierError,
)
from field import FIELD_SIZE  # noqa: E402
from honk_verifier import HonkVerifier  # noqa: E402

EXIT_OK, EXIT_REJECTED, EXIT_MALFORMED = 0, 1, 2
MALFORMED = (InvalidFieldElement, InvalidProofFormat, InvalidPublicInputFormat, InvalidPublicInputsLength, InvalidVerificationKey)
_HEX_TEXT = re.compile(rb"^[0-9a-fA-FxX\s]*$")


def read_public_inputs(path) -> list[bytes]:
    if path is None:
        return []
    data = pathlib.Path(path).read_bytes()
    if data.strip() and _HEX_TEXT.match(data):  # one hex value per line
        out = []
        for line in data.decode("ascii").split():
            value = int(line, 16)
            if value >= 1 << (8 * FIELD_SIZE):
                raise InvalidPublicInputFormat(len(out))
            out.append(value.to_bytes(FIELD_SIZE, "big"))
        return out
    if len(data) % FIELD_SIZE != 0:
        raise InvalidPublicInputFormat(len(data) // FIELD_SIZE)
    return [data[i : i + FIELD_SIZE] for i in range(0, len(data), FIELD_SIZE)]


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    ap.add_argument("--vk", required=True, type=pathlib.Path, help="verification key (128 x 32 bytes)")
    ap.add_argument("--proof", required=True, type=pathlib.Path, help="proof (440 x 32 bytes)")
    ap.add_argument("--public-inputs", type=pathlib.Path, default=None, help="public inputs (binary or hex lines)")
    ap.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        verifier = HonkVerifier.from_file(args.vk)
        public_inputs = read_public_inputs(args.public_inputs)
        verifier.verify(args.proof.read_bytes(), public_inputs)
    except MALFORMED as exc:
        print(f"malformed input: {exc.code}: {exc}", file=sys.stderr)
        return EXIT_MALFORMED
    except VerifierError as exc:
        print(f"rejected: {exc.code}: {exc}", file=sys.stderr)
        return EXIT_REJECTED
    except (OSError, ValueError) as exc:
        print(f"malformed input: {exc}", file=sys.stderr)
        return EXIT_MALFORMED
    print("verified")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())

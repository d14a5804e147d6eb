"""Frame inspection utility for BlazorPack developers.

Decodes a captured batch (hex text or a raw file) into a per-frame listing
plus the JSON view, or encodes a JSON array of messages back into frames::

    python -m blazorpack.tools.frame_debug decode "09 95 01 80 c0 a3 46 6f 6f 90"
    python -m blazorpack.tools.frame_debug encode '[{"MessageType": 6}]'
"""

from __future__ import annotations

import argparse
import dataclasses
import sys
from dataclasses import dataclass
from pathlib import Path

from blazorpack.batch import pack_from_json, unpack_to_json
from blazorpack.config import DEFAULT_CONFIG, CodecConfig, load_codec_config
from blazorpack.config.logging import configure_logging
from blazorpack.dispatcher import classify_binary
from blazorpack.protocol.errors import BlazorPackError
from blazorpack.protocol.frame import FrameSpan, iter_frames
from blazorpack.protocol.protocol import message_type_name


@dataclass(slots=True)
class FrameSnapshot:
    index: int
    offset: int
    prefix_length: int
    declared_length: int
    message_type: int | None
    message_name: str
    element_count: str
    payload_hex: str
    error: str | None = None

    def render(self) -> str:
        lines = [
            f"[FrameDebug] --- Frame {self.index} ---",
            f"offset={self.offset}",
            f"prefix_len={self.prefix_length}",
            f"payload_len={self.declared_length}",
            f"type={self.message_name}",
            f"elements={self.element_count}",
            f"payload={self.payload_hex}",
        ]
        if self.error is not None:
            lines.append(f"error={self.error}")
        return "\n".join(lines)


def _parse_payload(hex_string: str | None) -> bytes:
    if not hex_string:
        return b""
    compact = "".join(hex_string.split())
    if compact.startswith("0x") or compact.startswith("0X"):
        compact = compact[2:]
    if len(compact) % 2:
        raise ValueError("payload hex must contain an even number of digits")
    try:
        return bytes.fromhex(compact)
    except ValueError as exc:
        raise ValueError(f"Invalid payload hex '{hex_string}': {exc}") from exc


def _hex_with_spacing(data: bytes) -> str:
    return " ".join(f"{byte:02X}" for byte in data)


def build_snapshot(index: int, span: FrameSpan) -> FrameSnapshot:
    snapshot = FrameSnapshot(
        index=index,
        offset=span.offset,
        prefix_length=span.prefix_length,
        declared_length=span.length,
        message_type=None,
        message_name="-",
        element_count="-",
        payload_hex=_hex_with_spacing(span.payload),
    )
    try:
        classified = classify_binary(span.payload)
    except BlazorPackError as exc:
        snapshot.message_name = "INVALID"
        snapshot.error = exc.message
        return snapshot

    if classified is None:
        snapshot.message_name = "EMPTY"
        snapshot.element_count = "0"
        return snapshot

    snapshot.message_type = classified.message_type
    snapshot.message_name = message_type_name(classified.message_type)
    snapshot.element_count = "header-less" if classified.array_length is None else str(classified.array_length)
    return snapshot


def build_snapshots(blob: bytes) -> list[FrameSnapshot]:
    """Describe every frame of *blob*.

    Raises:
        FrameDecodeError: if the framing itself is broken.
    """
    return [build_snapshot(index, span) for index, span in enumerate(iter_frames(blob))]


def _read_text(value: str | None, path: Path | None) -> str:
    if path is not None:
        return path.read_text(encoding="utf-8")
    if value is None:
        raise ValueError("provide the input inline or with --file")
    return value


def _run_decode(args: argparse.Namespace, config: CodecConfig) -> int:
    if args.file is not None:
        blob = args.file.read_bytes()
    else:
        blob = _parse_payload(args.payload)

    status = 0
    try:
        snapshots = build_snapshots(blob)
    except BlazorPackError as exc:
        print(f"[FrameDebug] Framing error: {exc.message}")
        status = 1
    else:
        for snapshot in snapshots:
            print(snapshot.render())
            if snapshot.error is not None:
                status = 1
        print(f"[FrameDebug] {len(snapshots)} frame(s), {len(blob)} byte(s)")

    print(unpack_to_json(blob, config))
    return status


def _run_encode(args: argparse.Namespace, config: CodecConfig) -> int:
    text = _read_text(args.messages, args.file)
    encoded = pack_from_json(text, config)
    if encoded is None:
        print("[FrameDebug] Encoding failed; see log output for the reason", file=sys.stderr)
        return 1

    print(f"[FrameDebug] encoded_len={len(encoded)}")
    print(_hex_with_spacing(encoded))
    if args.out is not None:
        args.out.write_bytes(encoded)
        print(f"[FrameDebug] wrote {len(encoded)} bytes to {args.out}")
    return 0


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Decode or encode BlazorPack batches.")
    parser.add_argument(
        "--config",
        type=Path,
        help="TOML file with a [blazorpack] table (defaults apply when omitted).",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable DEBUG logging, including frame hex dumps.",
    )
    subcommands = parser.add_subparsers(dest="command", required=True)

    decode = subcommands.add_parser("decode", help="Binary batch to JSON.")
    decode.add_argument(
        "payload",
        nargs="?",
        help="Batch as hex string (spaces allowed).",
    )
    decode.add_argument(
        "--file",
        "-f",
        type=Path,
        help="Read the raw batch bytes from this file instead.",
    )

    encode = subcommands.add_parser("encode", help="JSON array of messages to binary batch.")
    encode.add_argument(
        "messages",
        nargs="?",
        help="JSON array of messages.",
    )
    encode.add_argument(
        "--file",
        "-f",
        type=Path,
        help="Read the JSON text from this file instead.",
    )
    encode.add_argument(
        "--out",
        "-o",
        type=Path,
        help="Also write the raw batch bytes to this file.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_arg_parser()
    args = parser.parse_args(argv)

    try:
        config = load_codec_config(args.config) if args.config is not None else DEFAULT_CONFIG
    except ValueError as exc:
        parser.error(str(exc))
        return 2
    if args.debug:
        config = dataclasses.replace(config, debug_logging=True)
    configure_logging(config)

    try:
        if args.command == "decode":
            return _run_decode(args, config)
        return _run_encode(args, config)
    except ValueError as exc:
        parser.error(str(exc))
        return 2
    except OSError as exc:
        print(f"[FrameDebug] {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())

"""Parse captured ping transcripts and check them against expectations.

Config keys:
- log_level (str, optional, default "warning")
- format (str, optional, "text" or "json", default "text")
- indent (int, optional, JSON indent, default 2)
- max_loss_percent (int, optional, default for every transcript)
- max_rtt_ms (float, optional, default for every transcript)
- transcripts (list, optional), each item:
    - name (str, optional, defaults to path)
    - path (str, required, "-" reads stdin)
    - max_loss_percent (int, optional)
    - max_rtt_ms (float, optional, maximum avg round-trip time)
    - expect_warning (str, optional, substring of the statistics warning)
    - expect_warning_regex (bool, optional, treat expect_warning as a regex)

Example:
transcripts:
  - name: gateway
    path: captures/gateway.txt
    max_loss_percent: 0
    max_rtt_ms: 5
"""

import argparse
import json
import logging
import os
import re
import sys

import yaml

from pingparse import ParseError, parse

DEFAULT_CONFIG = "pingparse.yaml"

logger = logging.getLogger("pingparse")


def _matches_expect(value, expect, expect_regex):
    if expect is None:
        return True
    if expect_regex:
        return re.search(str(expect), value) is not None
    return str(expect) in value


def _ms(value):
    return value.total_seconds() * 1000


def read_transcript(path):
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        return f.read()


def _summary(result):
    stats = result.statistics
    msg = (
        f"{stats.packets_received}/{stats.packets_transmitted} received, "
        f"{stats.packet_loss_percent}% loss"
    )
    if result.has_round_trip:
        msg += f", avg rtt {_ms(stats.round_trip_average):.3f}ms"
    if stats.warning:
        msg += f", warning: {stats.warning}"
    return msg


def check_transcript(cfg):
    path = cfg.get("path")
    max_loss_percent = cfg.get("max_loss_percent")
    max_rtt_ms = cfg.get("max_rtt_ms")
    expect_warning = cfg.get("expect_warning")
    expect_warning_regex = bool(cfg.get("expect_warning_regex", False))
    if not path:
        return False, "transcript requires path", None

    try:
        text = read_transcript(path)
    except OSError as exc:
        return False, f"read failed: {exc}", None

    try:
        result = parse(text)
    except ParseError as exc:
        logger.debug("parse of %s failed", path, exc_info=True)
        return False, f"parse error: {exc}", None

    stats = result.statistics
    if max_loss_percent is not None:
        if stats.packet_loss_percent > int(max_loss_percent):
            return (
                False,
                f"packet loss {stats.packet_loss_percent}% > {int(max_loss_percent)}%",
                result,
            )

    if max_rtt_ms is not None:
        if not result.has_round_trip:
            return False, "no round-trip statistics", result
        avg_rtt_ms = _ms(stats.round_trip_average)
        if avg_rtt_ms > float(max_rtt_ms):
            return (
                False,
                f"avg rtt {avg_rtt_ms:.3f}ms > {float(max_rtt_ms):.3f}ms",
                result,
            )

    if expect_warning is not None:
        if not _matches_expect(stats.warning, expect_warning, expect_warning_regex):
            return False, "warning did not match expectation", result

    return True, _summary(result), result


def collect_transcripts(config, paths):
    transcripts = config.get("transcripts") or []
    if not isinstance(transcripts, list):
        raise ValueError("transcripts must be a list")
    if not all(isinstance(item, dict) for item in transcripts):
        raise ValueError("each transcript must be a mapping")
    items = [dict(item) for item in transcripts]
    items += [{"path": path} for path in paths]

    for item in items:
        item.setdefault("name", item.get("path") or "(unnamed)")
        for key in ("max_loss_percent", "max_rtt_ms"):
            if key not in item and config.get(key) is not None:
                item[key] = config[key]
    return items


def run_transcripts(items, output_format="text", indent=2):
    any_failed = False
    documents = []
    for item in items:
        name = item["name"]
        ok, msg, result = check_transcript(item)
        if not ok:
            any_failed = True

        if output_format == "json":
            documents.append(
                {
                    "name": name,
                    "ok": ok,
                    "message": msg,
                    "result": result.as_dict() if result is not None else None,
                }
            )
            continue
        status = "ok" if ok else "fail"
        print(f"[{status}] {name}: {msg}")

    if output_format == "json":
        print(json.dumps(documents, indent=indent))
    return 1 if any_failed else 0


def load_config(path, required):
    if not required and not os.path.exists(path):
        return {}
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def configure_logging(level_name, verbose=False):
    level = logging.DEBUG if verbose else getattr(logging, str(level_name).upper(), None)
    if not isinstance(level, int):
        raise ValueError(f"unknown log_level: {level_name}")
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def main(argv=None):
    parser = argparse.ArgumentParser(description="Ping transcript parser")
    parser.add_argument(
        "-c",
        "--config",
        default=None,
        help=f"path to config YAML (default: {DEFAULT_CONFIG} when present)",
    )
    parser.add_argument(
        "--format",
        choices=("text", "json"),
        default=None,
        help="output format (default: text)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="log every classified line"
    )
    parser.add_argument(
        "transcripts",
        nargs="*",
        help="captured ping output files, '-' for stdin",
    )
    args = parser.parse_args(argv)

    config_path = args.config or DEFAULT_CONFIG
    try:
        config = load_config(config_path, required=args.config is not None)
    except OSError as exc:
        print(f"failed to read config: {exc}")
        return 1
    except yaml.YAMLError as exc:
        print(f"invalid yaml: {exc}")
        return 1
    if not isinstance(config, dict):
        print("config error: top level must be a mapping")
        return 1

    try:
        configure_logging(config.get("log_level", "warning"), args.verbose)
        items = collect_transcripts(config, args.transcripts)
    except ValueError as exc:
        print(f"config error: {exc}")
        return 1

    if not items:
        print("nothing to parse: pass transcript files or list them in the config")
        return 1

    output_format = args.format or config.get("format", "text")
    if output_format not in ("text", "json"):
        print(f"config error: unknown format: {output_format}")
        return 1
    return run_transcripts(items, output_format, int(config.get("indent", 2)))


if __name__ == "__main__":
    sys.exit(main())

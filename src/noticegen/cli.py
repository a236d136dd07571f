# Copyright 2026 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# SPDX-License-Identifier: Apache-2.0

"""Command-line entry point.

Usage::

    go list -deps -json ./... | noticegen --license-data license-list-data > NOTICE.txt
    go list -m -json all | noticegen --format modules --out NOTICE.txt --summary
"""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console
from rich.table import Table

from noticegen import __version__
from noticegen._types import NoticeData
from noticegen.classify import ClassifierKind, make_classifier
from noticegen.config import NoticeConfig, resolve_config
from noticegen.deps import InputFormat, open_input, parse_dependencies
from noticegen.errors import NoticeGenError
from noticegen.logging import configure_logging, get_logger
from noticegen.notice import detect_licenses, generate_notice_data
from noticegen.render import render_notice
from noticegen.spdx import SpdxLicenseStore

__all__ = [
    'build_parser',
    'main',
    'run',
]

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser for ``noticegen``."""
    parser = argparse.ArgumentParser(
        prog='noticegen',
        description='Generate a NOTICE file from a dependency listing.',
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument(
        '--in',
        dest='input',
        metavar='PATH',
        help="Dependency listing (output of 'go list -deps -json' or 'go list -m -json all'); '-' for stdin.",
    )
    parser.add_argument('--out', dest='output', metavar='PATH', help="Path to write the NOTICE to; '-' for stdout.")
    parser.add_argument('--template', metavar='PATH', help='Jinja2 template for the NOTICE (default: built-in).')
    parser.add_argument(
        '--format',
        choices=[f.value for f in InputFormat],
        help='Listing format (default: packages).',
    )
    parser.add_argument(
        '--include-indirect',
        action='store_true',
        default=None,
        help='Keep indirect dependencies of a module listing.',
    )
    parser.add_argument(
        '--classifier',
        choices=[c.value for c in ClassifierKind],
        help='License classifier to run (default: patterns).',
    )
    parser.add_argument(
        '--license-data',
        dest='license_data_dir',
        metavar='DIR',
        help='Checkout of the SPDX license-list-data repository.',
    )
    parser.add_argument(
        '--license-texts',
        dest='license_texts_dir',
        metavar='DIR',
        help='Directory of <license-id>.txt files that override the SPDX texts.',
    )
    parser.add_argument('--scancode-bin', metavar='PATH', help='ScanCode executable for --classifier scancode.')
    parser.add_argument('--config', type=Path, metavar='FILE', help='TOML config file (default: noticegen.toml).')
    parser.add_argument('--summary', action='store_true', help='Print a license summary table to stderr.')
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging.')
    verbosity.add_argument('-q', '--quiet', action='store_true', help='Only log warnings and errors.')
    parser.add_argument('--json-log', action='store_true', help='Log JSON lines instead of console output.')
    return parser


def run(config: NoticeConfig) -> list[NoticeData]:
    """Run the whole pipeline for *config* and return the NOTICE data."""
    with open_input(config.input) as stream:
        deps = parse_dependencies(stream, config.input_format, include_indirect=config.include_indirect)
    logger.info('parsed_dependencies', count=len(deps), format=config.input_format.value)

    classifier = make_classifier(config.classifier, scancode_bin=config.scancode_bin)
    groups = detect_licenses(deps, classifier, skip_copyright=config.skip_copyright)

    if config.license_data_dir is None:
        logger.warning('no_license_data', hint='pass --license-data or set NOTICEGEN_LICENSE_DATA')
    store = SpdxLicenseStore(config.license_data_dir, extra_texts_dir=config.license_texts_dir)
    notices = generate_notice_data(groups, store)

    render_notice(notices, config.template, config.output)
    return notices


def _print_summary(notices: Sequence[NoticeData], console: Console) -> None:
    table = Table(title='NOTICE summary')
    table.add_column('License', style='bold')
    table.add_column('Name')
    table.add_column('Dependencies', justify='right')
    for notice in notices:
        table.add_row(notice.license_id, notice.license_name, str(len(notice.dependencies)))
    table.add_section()
    table.add_row('total', '', str(sum(len(n.dependencies) for n in notices)))
    console.print(table)


def main(argv: Sequence[str] | None = None) -> int:
    """Run noticegen and return the process exit code."""
    args = build_parser().parse_args(argv)
    configure_logging(verbose=args.verbose, quiet=args.quiet, json_log=args.json_log)

    cli_values = {
        'input': args.input,
        'output': args.output,
        'template': args.template,
        'format': args.format,
        'include_indirect': args.include_indirect,
        'classifier': args.classifier,
        'license_data_dir': args.license_data_dir,
        'license_texts_dir': args.license_texts_dir,
        'scancode_bin': args.scancode_bin,
    }
    try:
        config = resolve_config(cli_values, config_path=args.config)
        notices = run(config)
    except NoticeGenError as exc:
        logger.error('noticegen_failed', error=str(exc))
        return 1

    if args.summary:
        _print_summary(notices, Console(stderr=True))
    return 0

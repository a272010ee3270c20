#!/usr/bin/env python3
"""
Generate a bracket from a participants file and print it.

Usage:
    python src/generate_bracket.py participants.txt
    python src/generate_bracket.py teams.yaml --type double --seed 42
    python src/generate_bracket.py teams.yaml --format yaml

A .yaml/.yml file holds either a list of names or a mapping of
group -> list of names (groups are flattened in order). Any other file is
read as comma or newline separated names.

Exit codes:
    0: Success
    1: Unusable input
"""
import argparse
import json
import logging
import os
import random
import sys

import yaml

from brackets.double_elimination import generate_double_elimination
from brackets.elimination import generate_single_elimination
from brackets.errors import BracketError, ParticipantInputError
from brackets.export import export_schedule
from brackets.models import serialize_result
from brackets.participants import parse_participants

logger = logging.getLogger(__name__)


def load_participants(file_path):
    with open(file_path, mode='r', encoding='utf-8') as file:
        content = file.read()

    if os.path.splitext(file_path)[1].lower() in ('.yaml', '.yml'):
        data = yaml.safe_load(content)
        if data is None:
            raise ParticipantInputError("Participant input cannot be empty.")
        if isinstance(data, dict):
            names = []
            for group, group_names in data.items():
                if group_names is None:
                    continue
                if not isinstance(group_names, list):
                    raise ParticipantInputError(f"{file_path}: group '{group}' must be a list of names.")
                names.extend(group_names)
        elif isinstance(data, list):
            names = data
        else:
            raise ParticipantInputError(f"{file_path}: expected a list or mapping of names.")
        names = [str(name).strip() for name in names if name is not None]
        return parse_participants("\n".join(names))['participants']

    return parse_participants(content)['participants']


def render(result, tournament_type, participant_count, output_format):
    if output_format == 'yaml':
        return yaml.dump(serialize_result(result), default_flow_style=False, sort_keys=False, allow_unicode=True)
    if output_format == 'json':
        return json.dumps(serialize_result(result), indent=2) + "\n"
    return export_schedule(result, tournament_type, participant_count)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Generate a single or double elimination bracket.')
    parser.add_argument('participants_file', help='Text or YAML file with participant names')
    parser.add_argument('--type', choices=['single', 'double'], default='single', help='Elimination format')
    parser.add_argument('--seed', type=int, default=None, help='Seed for a reproducible draw')
    parser.add_argument('--format', choices=['text', 'yaml', 'json'], default='text', help='Output format')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        participants = load_participants(args.participants_file)
    except (OSError, yaml.YAMLError, BracketError) as e:
        print(f"Error: {getattr(e, 'message', e)}", file=sys.stderr)
        return 1

    generator = generate_double_elimination if args.type == 'double' else generate_single_elimination
    result = generator(participants, rng=random.Random(args.seed))
    if result['error']:
        print(f"Error: {result['error']}", file=sys.stderr)
        return 1

    logger.debug("Loaded %d participants from %s", len(participants), args.participants_file)
    print(render(result, args.type, len(participants), args.format), end='')
    return 0


if __name__ == '__main__':
    sys.exit(main())

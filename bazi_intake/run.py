"""
CLI wrapper around the intake form.

Usage:
    bazi-intake --gender male --birth-year 1990 \
        --year-pillar 甲子 --month-pillar 丙寅 --day-pillar 戊辰 --hour-pillar 壬戌 \
        --start-age 3 --first-da-yun 丁卯 [--name NAME] [--luck-cycles N]

Prints the validated record plus advisory feedback as JSON on success,
or the field errors on stderr with exit status 1.
"""

import argparse
import json
import logging
import sys

from dotenv import load_dotenv

from bazi_intake.config import LOG_FORMAT, LUCK_CYCLE_PREVIEW_COUNT, log_level
from bazi_intake.form import BaziFormSession, REQUIRED_FIELDS, advisory


def build_parser():
    parser = argparse.ArgumentParser(description="Validate a four pillars birth chart.")
    parser.add_argument("--name", default="")
    parser.add_argument("--gender", default="male", choices=["male", "female"])
    parser.add_argument("--birth-year", dest="birth_year", default="")
    parser.add_argument("--year-pillar", dest="year_pillar", default="")
    parser.add_argument("--month-pillar", dest="month_pillar", default="")
    parser.add_argument("--day-pillar", dest="day_pillar", default="")
    parser.add_argument("--hour-pillar", dest="hour_pillar", default="")
    parser.add_argument("--start-age", dest="start_age", default="")
    parser.add_argument("--first-da-yun", dest="first_da_yun", default="")
    parser.add_argument("--luck-cycles", dest="luck_cycles", type=int,
                        default=LUCK_CYCLE_PREVIEW_COUNT,
                        help="Number of luck cycles in the advisory preview")
    return parser


def main(argv=None):
    load_dotenv()
    logging.basicConfig(level=log_level(), format=LOG_FORMAT)

    args = build_parser().parse_args(argv)

    submitted = []
    session = BaziFormSession(on_submit=submitted.append)
    session.change("name", args.name)
    session.change("gender", args.gender)
    for name in REQUIRED_FIELDS:
        session.change(name, getattr(args, name))

    if not session.submit():
        print(json.dumps({"errors": session.errors}, indent=2, ensure_ascii=False),
              file=sys.stderr)
        return 1

    record = submitted[0]
    result = {
        "record": record.to_dict(),
        "advisory": advisory(record, args.luck_cycles),
    }
    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())

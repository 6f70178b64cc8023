"""
Command-line wrapper.
"""

import json

from bazi_intake.run import main

VALID_ARGS = [
    "--name", "Alex",
    "--birth-year", "1990",
    "--year-pillar", "甲子",
    "--month-pillar", "丙寅",
    "--day-pillar", "戊辰",
    "--hour-pillar", "壬戌",
    "--start-age", "3",
    "--first-da-yun", "丁卯",
]


class TestRun:

    def test_valid_chart(self, capsys):
        assert main(VALID_ARGS + ["--luck-cycles", "3"]) == 0

        result = json.loads(capsys.readouterr().out)
        assert result["record"] == {
            "name": "Alex",
            "gender": "male",
            "birth_year": "1990",
            "year_pillar": "甲子",
            "month_pillar": "丙寅",
            "day_pillar": "戊辰",
            "hour_pillar": "壬戌",
            "start_age": "3",
            "first_da_yun": "丁卯",
        }
        assert result["advisory"]["direction"] == "forward"
        assert [c["code"] for c in result["advisory"]["luck_cycles"]] == ["丁卯", "戊辰", "己巳"]

    def test_female_runs_backward_with_hint(self, capsys):
        assert main(VALID_ARGS + ["--gender", "female"]) == 0

        advisory = json.loads(capsys.readouterr().out)["advisory"]
        assert advisory["direction"] == "backward"
        assert "乙丑" in advisory["first_da_yun_hint"]

    def test_invalid_chart(self, capsys):
        args = [a if a != "甲子" else "甲丑" for a in VALID_ARGS]
        assert main(args) == 1

        captured = capsys.readouterr()
        assert captured.out == ""
        assert json.loads(captured.err) == {
            "errors": {"year_pillar": "must be one of the 60 cycle codes"}
        }

    def test_missing_fields(self, capsys):
        assert main([]) == 1
        errors = json.loads(capsys.readouterr().err)["errors"]
        assert errors["birth_year"] == "year required"
        assert len(errors) == 7

    def test_loads_dotenv_and_tolerates_unknown_log_level(self, monkeypatch, capsys):
        loaded = []
        monkeypatch.setattr("bazi_intake.run.load_dotenv", lambda: loaded.append(True))
        monkeypatch.setenv("LOG_LEVEL", "VERBOSE")

        assert main(VALID_ARGS) == 0
        assert loaded == [True]
        assert json.loads(capsys.readouterr().out)["record"]["year_pillar"] == "甲子"

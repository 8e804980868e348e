"""
Unit tests for the benchmark CLI argument handling.
"""

from otelsql_bench.comparison import build_config, build_parser, main


def parse(*argv):
    return build_config(build_parser().parse_args(list(argv)))


class TestBuildConfig:

    def test_defaults(self):
        config = parse()

        assert config.window_size == 200
        assert config.subjects == ["dbapi", "sqlalchemy", "psycopg"]
        assert config.max_warmup_windows == 1000
        assert config.tracing_mode == "none"
        assert not config.include_baseline

    def test_skip_flags(self):
        config = parse("--skip-dbapi", "--skip-psycopg")

        assert config.subjects == ["sqlalchemy"]

    def test_unbounded_warmup(self):
        config = parse("--max-warmup-windows", "0", "--max-warmup-seconds", "30")

        assert config.max_warmup_windows is None
        assert config.max_warmup_seconds == 30.0

    def test_connection_arguments(self):
        config = parse("--host", "db", "--port", "6543", "--database", "bench", "--user", "u")

        assert config.connection.host == "db"
        assert config.connection.port == 6543
        assert config.connection.database == "bench"
        assert config.connection.username == "u"

    def test_benchmark_arguments(self):
        config = parse(
            "--window-size", "50",
            "--tolerance", "0.1",
            "--record-size", "4",
            "--row-limit", "1024",
            "--include-baseline",
            "--isolate-subjects",
            "--tracing", "sdk",
        )

        assert config.window_size == 50
        assert config.tolerance == 0.1
        assert config.record_size == 4
        assert config.row_limit == 1024
        assert config.include_baseline
        assert config.isolate_subjects
        assert config.tracing_mode == "sdk"
        assert config.selected_subjects()[0] == "baseline"


class TestMain:

    def test_invalid_configuration_exits_nonzero(self):
        assert main(["--window-size", "0", "--skip-validation"]) == 1

    def test_no_subjects_exits_nonzero(self):
        assert main(["--skip-dbapi", "--skip-sqlalchemy", "--skip-psycopg", "--skip-validation"]) == 1

    def test_malformed_pgport_exits_nonzero(self, monkeypatch):
        monkeypatch.setenv("PGPORT", "not-a-port")

        assert main(["--skip-validation"]) == 1

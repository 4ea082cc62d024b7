"""Tests for slurmify.config module."""

import dataclasses

import pytest
import yaml

from slurmify.config import (
    DEFAULT_CONFIG,
    ENV_VAR_MAP,
    Config,
    ConfigError,
    JobConfig,
    _deep_merge,
    _get_nested,
    _set_nested,
    get_config,
    init_config,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove SLURMIFY_* variables from the environment."""
    for env_var in ENV_VAR_MAP:
        monkeypatch.delenv(env_var, raising=False)


class TestDeepMerge:
    """Tests for _deep_merge function."""

    def test_nested_merge(self):
        """Test merging nested dictionaries."""
        base = {"slurm": {"partition": "standard", "mem": "4G"}, "job_prefix": "job"}
        override = {"slurm": {"mem": "8G"}}
        result = _deep_merge(base, override)
        assert result == {"slurm": {"partition": "standard", "mem": "8G"}, "job_prefix": "job"}

    def test_base_not_modified(self):
        """Test that the base dictionary is left untouched."""
        base = {"a": {"x": 1}}
        _deep_merge(base, {"a": {"x": 2}})
        assert base == {"a": {"x": 1}}


class TestNestedAccess:
    """Tests for _get_nested and _set_nested functions."""

    def test_get_nested_deep(self):
        """Test getting a nested key."""
        assert _get_nested({"a": {"b": {"c": 3}}}, "a.b.c") == 3

    def test_get_nested_missing(self):
        """Test getting a missing key returns default."""
        assert _get_nested({"a": 1}, "a.b", "default") == "default"

    def test_set_nested_creates_parents(self):
        """Test setting a nested key under missing parents."""
        d = {}
        _set_nested(d, "slurm.account", "lab")
        assert d == {"slurm": {"account": "lab"}}

    def test_set_nested_replaces_scalar_parent(self):
        """Test that a scalar in the way is replaced by a dict."""
        d = {"slurm": "oops"}
        _set_nested(d, "slurm.account", "lab")
        assert d == {"slurm": {"account": "lab"}}


class TestConfig:
    """Tests for Config class."""

    def test_default_config(self, tmp_path):
        """Test that defaults apply without a config file."""
        config = Config(project_root=tmp_path)
        assert config.get("output_dir") == "./Sbatch"
        assert config.get("logs_dir") == "./Logs"
        assert config.get("slurm.partition") == "standard"
        assert config.get("slurm.cpus") == 1
        assert config.get("ui.mode") == "plain"

    def test_default_config_path(self, tmp_path):
        """Test the default project config location."""
        config = Config(project_root=tmp_path)
        assert config.config_path == tmp_path / ".slurmify" / "config.yaml"

    def test_config_file_overrides_defaults(self, tmp_path):
        """Test that values from the YAML file are merged over defaults."""
        config_path = tmp_path / "config.yaml"
        config_path.write_text(yaml.dump({"slurm": {"partition": "gpu", "account": "lab"}}))

        config = Config(config_path=config_path)
        assert config.get("slurm.partition") == "gpu"
        assert config.get("slurm.account") == "lab"
        assert config.get("slurm.mem") == "4G"

    def test_env_config_path(self, tmp_path, monkeypatch):
        """Test that SLURMIFY_CONFIG selects the config file."""
        config_path = tmp_path / "elsewhere.yaml"
        config_path.write_text(yaml.dump({"job_prefix": "env"}))
        monkeypatch.setenv("SLURMIFY_CONFIG", str(config_path))

        config = Config(project_root=tmp_path)
        assert config.config_path == config_path
        assert config.get("job_prefix") == "env"

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        """Test that environment variables beat the config file."""
        config_path = tmp_path / "config.yaml"
        config_path.write_text(yaml.dump({"slurm": {"mem": "8G"}}))
        monkeypatch.setenv("SLURMIFY_MEM", "32G")
        monkeypatch.setenv("SLURMIFY_OUTPUT_DIR", "scripts")

        config = Config(config_path=config_path)
        assert config.get("slurm.mem") == "32G"
        assert config.get("output_dir") == "scripts"

    def test_empty_config_file(self, tmp_path):
        """Test that an empty file leaves the defaults in place."""
        config_path = tmp_path / "config.yaml"
        config_path.write_text("")
        assert Config(config_path=config_path).as_dict() == DEFAULT_CONFIG

    def test_non_mapping_config_file(self, tmp_path):
        """Test that a YAML list is rejected."""
        config_path = tmp_path / "config.yaml"
        config_path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError):
            Config(config_path=config_path)

    def test_unreadable_config_file(self, tmp_path):
        """Test that a config path naming a directory raises ConfigError."""
        config_dir = tmp_path / "config.yaml"
        config_dir.mkdir()
        with pytest.raises(ConfigError, match="could not read config file"):
            Config(config_path=config_dir)

    def test_save_round_trip(self, tmp_path):
        """Test that a saved config loads back identically."""
        config = Config(project_root=tmp_path)
        saved = config.save(tmp_path / "out" / "config.yaml")
        assert Config(config_path=saved).as_dict() == config.as_dict()

    def test_get_config_reload(self, tmp_path):
        """Test that reload creates a fresh instance."""
        first = get_config(project_root=tmp_path, reload=True)
        assert get_config() is first
        assert get_config(project_root=tmp_path, reload=True) is not first


class TestJobConfig:
    """Tests for Config.job_config."""

    def test_defaults(self, tmp_path):
        """Test a job config built from defaults and required values."""
        job = Config(project_root=tmp_path).job_config(input_file="cmds.txt", account="lab")
        assert job == JobConfig(input_file="cmds.txt", account="lab")
        assert job.partition == "standard"
        assert job.cpus == 1
        assert job.mem == "4G"
        assert job.time == "01:00:00"
        assert job.job_prefix == "job"
        assert job.gres == ""
        assert job.template is None

    def test_frozen(self, tmp_path):
        """Test that JobConfig cannot be modified."""
        job = Config(project_root=tmp_path).job_config(input_file="cmds.txt", account="lab")
        with pytest.raises(dataclasses.FrozenInstanceError):
            job.account = "other"

    def test_none_overrides_ignored(self, tmp_path, monkeypatch):
        """Test that None overrides fall back to lower layers."""
        monkeypatch.setenv("SLURMIFY_ACCOUNT", "envlab")
        job = Config(project_root=tmp_path).job_config(
            input_file="cmds.txt", account=None, partition="gpu",
        )
        assert job.account == "envlab"
        assert job.partition == "gpu"

    def test_missing_account(self, tmp_path):
        """Test that a missing account is a configuration error."""
        with pytest.raises(ConfigError, match="account"):
            Config(project_root=tmp_path).job_config(input_file="cmds.txt")

    def test_missing_input(self, tmp_path):
        """Test that a missing input file is a configuration error."""
        with pytest.raises(ConfigError, match="input"):
            Config(project_root=tmp_path).job_config(account="lab")

    def test_cpus_from_env_string(self, tmp_path, monkeypatch):
        """Test that a CPU count from the environment is converted to int."""
        monkeypatch.setenv("SLURMIFY_CPUS", "16")
        job = Config(project_root=tmp_path).job_config(input_file="c", account="a")
        assert job.cpus == 16

    @pytest.mark.parametrize("cpus", ["many", 0, -2])
    def test_invalid_cpus(self, tmp_path, cpus):
        """Test that non-integer and non-positive CPU counts are rejected."""
        with pytest.raises(ConfigError, match="cpus"):
            Config(project_root=tmp_path).job_config(input_file="c", account="a", cpus=cpus)

    def test_unknown_override(self, tmp_path):
        """Test that an unknown parameter name is rejected."""
        with pytest.raises(ConfigError):
            Config(project_root=tmp_path).job_config(input_file="c", account="a", nodes=2)

    def test_null_strings_become_empty(self, tmp_path):
        """Test that null YAML values for optional strings become empty."""
        config_path = tmp_path / "config.yaml"
        config_path.write_text(yaml.dump({"module": None, "slurm": {"email": None}}))
        job = Config(config_path=config_path).job_config(input_file="c", account="a")
        assert job.module == ""
        assert job.email == ""

    @pytest.mark.parametrize("template", ["", None])
    def test_empty_template_selects_builtin(self, tmp_path, template):
        """Test that an empty or null template setting means the built-in one."""
        config_path = tmp_path / "config.yaml"
        config_path.write_text(yaml.dump({"template": template}))
        job = Config(config_path=config_path).job_config(input_file="c", account="a")
        assert job.template is None

    def test_template_override_kept(self, tmp_path):
        """Test that a template given on the command line is kept as a string."""
        job = Config(project_root=tmp_path).job_config(
            input_file="c", account="a", template=tmp_path / "t.j2"
        )
        assert job.template == str(tmp_path / "t.j2")


class TestInitConfig:
    """Tests for init_config function."""

    def test_writes_file(self, tmp_path):
        """Test creating a starter config file with overrides."""
        path = init_config(project_root=tmp_path, slurm={"account": "lab"})
        assert path == tmp_path / ".slurmify" / "config.yaml"

        data = yaml.safe_load(path.read_text())
        assert data["slurm"]["account"] == "lab"
        assert data["slurm"]["partition"] == "standard"

    def test_refuses_overwrite(self, tmp_path):
        """Test that an existing file is kept unless overwrite=True."""
        init_config(project_root=tmp_path)
        with pytest.raises(FileExistsError):
            init_config(project_root=tmp_path)
        init_config(project_root=tmp_path, overwrite=True, job_prefix="x")
        assert Config(project_root=tmp_path).get("job_prefix") == "x"

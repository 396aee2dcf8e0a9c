from __future__ import annotations

from pathlib import Path

import pytest

from svcregctl.config import EnforcementStrategy, ServiceCheckConfig, load_config, parse_strategy
from svcregctl.core.errors import ScriptError
from svcregctl.core.exit_codes import ERR_CONFIG


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("FAIL", EnforcementStrategy.FAIL),
        ("fail", EnforcementStrategy.FAIL),
        ("Failure", EnforcementStrategy.FAIL),
        ("warn", EnforcementStrategy.WARN),
        ("WARNING", EnforcementStrategy.WARN),
        (None, EnforcementStrategy.FAIL),
    ],
)
def test_parse_strategy_accepts_short_and_long_forms(raw: str | None, expected: EnforcementStrategy) -> None:
    assert parse_strategy(raw) is expected


def test_invalid_strategy_is_config_error() -> None:
    with pytest.raises(ScriptError) as err:
        parse_strategy("explode")
    assert err.value.code == ERR_CONFIG
    assert err.value.kind == "config_error"
    assert str(err.value) == "Invalid strategy: explode. Valid values are: FAIL, WARN"


def test_empty_interface_list_is_rejected() -> None:
    with pytest.raises(ScriptError) as err:
        ServiceCheckConfig(service_interfaces=())
    assert err.value.kind == "config_error"
    assert "serviceInterfaces" in str(err.value)


def test_config_is_immutable_and_normalized() -> None:
    config = ServiceCheckConfig(service_interfaces=(" a.B ", "a.B", "c.D"), packages_to_scan=("a", ""), strategy="warning")  # type: ignore[arg-type]
    assert config.service_interfaces == ("a.B", "c.D")
    assert config.packages_to_scan == ("a",)
    assert config.strategy is EnforcementStrategy.WARN
    with pytest.raises(AttributeError):
        config.strategy = EnforcementStrategy.FAIL  # type: ignore[misc]


def test_loads_pyproject_table(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text(
        '[tool.svcregctl]\nserviceInterfaces = ["com.acme.spi.Codec"]\npackagesToScan = ["com.acme"]\nstrategy = "warn"\n',
        encoding="utf-8",
    )
    config = load_config(project_root=tmp_path, env={})
    assert config.service_interfaces == ("com.acme.spi.Codec",)
    assert config.packages_to_scan == ("com.acme",)
    assert config.strategy is EnforcementStrategy.WARN


def test_loads_yaml_file_and_applies_overrides(tmp_path: Path) -> None:
    path = tmp_path / "gate.yaml"
    path.write_text("service_interfaces:\n  - com.acme.spi.Codec\ndangling_is_violation: true\njobs: 2\n", encoding="utf-8")
    config = load_config(config_file=path, env={}, overrides={"strategy": "WARN", "service_interfaces": []})
    assert config.service_interfaces == ("com.acme.spi.Codec",)
    assert config.dangling_is_violation is True
    assert config.jobs == 2
    assert config.strategy is EnforcementStrategy.WARN


def test_environment_strategy_is_below_cli_overrides(tmp_path: Path) -> None:
    overrides = {"service_interfaces": ["a.B"]}
    assert load_config(project_root=tmp_path, env={"SVCREGCTL_STRATEGY": "warn"}, overrides=overrides).strategy is EnforcementStrategy.WARN
    overrides["strategy"] = "fail"
    assert load_config(project_root=tmp_path, env={"SVCREGCTL_STRATEGY": "warn"}, overrides=overrides).strategy is EnforcementStrategy.FAIL


def test_schema_violation_is_config_error(tmp_path: Path) -> None:
    path = tmp_path / "svcregctl.toml"
    path.write_text('service_interfaces = "com.acme.spi.Codec"\n', encoding="utf-8")
    with pytest.raises(ScriptError) as err:
        load_config(project_root=tmp_path, env={})
    assert err.value.code == ERR_CONFIG
    assert "service_interfaces" in str(err.value)


def test_unknown_keys_are_rejected(tmp_path: Path) -> None:
    path = tmp_path / "svcregctl.toml"
    path.write_text('service_interfaces = ["a.B"]\nstrategey = "warn"\n', encoding="utf-8")
    with pytest.raises(ScriptError, match="unknown keys: strategey"):
        load_config(config_file=path, env={})


def test_missing_interfaces_everywhere_fails_before_scanning(tmp_path: Path) -> None:
    with pytest.raises(ScriptError) as err:
        load_config(project_root=tmp_path, env={})
    assert err.value.kind == "config_error"


def test_undecodable_config_file_is_config_error(tmp_path: Path) -> None:
    path = tmp_path / "svcregctl.toml"
    path.write_bytes(b'service_interfaces = ["a.B"]\n# \xff\n')
    with pytest.raises(ScriptError) as err:
        load_config(config_file=path, env={})
    assert err.value.code == ERR_CONFIG
    assert "cannot read config file" in str(err.value)


def test_fail_mode_follows_strategy() -> None:
    assert ServiceCheckConfig(service_interfaces=("a.B",)).fail_mode
    assert not ServiceCheckConfig(service_interfaces=("a.B",), strategy=EnforcementStrategy.WARN).fail_mode

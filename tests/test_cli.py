"""
tests/test_cli.py
Tests for the nestgen command-line interface and its exit codes.
"""

from __future__ import annotations

import pathlib
from typing import Any, Dict, List

import pytest
import yaml

from nestgen.cli import (
    EXIT_CONFIGURATION_ERROR,
    EXIT_INPUT_ERROR,
    EXIT_IO_ERROR,
    EXIT_SUCCESS,
    cli_main,
)


def _run(argv: List[str]) -> int:
    with pytest.raises(SystemExit) as excinfo:
        cli_main(argv)
    return excinfo.value.code


class TestCliExitCodes:

    def test_success(
        self,
        pets_schema_yaml_path: pathlib.Path,
        results_dir: pathlib.Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = _run(["-s", str(pets_schema_yaml_path), "-o", str(results_dir), "-q"])
        assert code == EXIT_SUCCESS
        assert (results_dir / "models" / "Pet.model.ts").is_file()
        assert (results_dir / "shop.module.ts").is_file()
        assert "SUCCESS" in capsys.readouterr().out

    def test_overrides_applied(
        self, pets_schema_yaml_path: pathlib.Path, results_dir: pathlib.Path
    ) -> None:
        code = _run(
            [
                "-s", str(pets_schema_yaml_path),
                "-o", str(results_dir),
                "--no-configs",
                "--index-file",
                "--case-file", "param",
                "--export-type", "default",
                "-q",
            ]
        )
        assert code == EXIT_SUCCESS
        assert (results_dir / "pet.model.ts").is_file()
        assert (results_dir / "index.ts").is_file()
        assert not (results_dir / "tsconfig.json").exists()
        assert "export default class PetModel" in (results_dir / "pet.model.ts").read_text()

    def test_missing_schema(self, tmp_path: pathlib.Path) -> None:
        assert _run(["-s", str(tmp_path / "absent.yaml")]) == EXIT_INPUT_ERROR

    def test_schema_is_directory(self, tmp_path: pathlib.Path) -> None:
        assert _run(["-s", str(tmp_path)]) == EXIT_INPUT_ERROR

    def test_invalid_choice_is_input_error(self, pets_schema_yaml_path: pathlib.Path) -> None:
        assert _run(["-s", str(pets_schema_yaml_path), "--case-file", "snake"]) == EXIT_INPUT_ERROR

    def test_bad_option_in_file(
        self,
        pets_schema_dict: Dict[str, Any],
        tmp_path: pathlib.Path,
        results_dir: pathlib.Path,
    ) -> None:
        pets_schema_dict["config"]["convertCaseEntity"] = "snake"
        path = tmp_path / "bad.yaml"
        path.write_text(yaml.dump(pets_schema_dict), encoding="utf-8")

        assert _run(["-s", str(path), "-o", str(results_dir)]) == EXIT_CONFIGURATION_ERROR
        assert not results_dir.exists()

    def test_unwritable_output(
        self, pets_schema_yaml_path: pathlib.Path, tmp_path: pathlib.Path
    ) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        assert _run(["-s", str(pets_schema_yaml_path), "-o", str(blocker / "shop")]) == EXIT_IO_ERROR

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert _run(["--version"]) == EXIT_SUCCESS
        assert "nestgen v" in capsys.readouterr().out

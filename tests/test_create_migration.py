from ctf01d.create_migration import create_migration, latest_update, main

import pytest


def test_latest_update_takes_highest_target():
    names = [
        "update0005_update0006.py",
        "update0006_update0006testdata.py",
        "update0006_update0007.py",
        "notes.txt",
    ]
    assert latest_update(names) == 7


def test_latest_update_without_steps_is_zero():
    assert latest_update(["readme.md", "helpers.py"]) == 0


def test_create_migration_names_next_step(tmp_path):
    (tmp_path / "update0020_update0021.py").write_text("")
    (tmp_path / "update0019_update0020.py").write_text("")
    path = create_migration(tmp_path)
    assert path.name == "update0021_update0022.py"
    text = path.read_text(encoding="utf-8")
    assert '"update0021"' in text and '"update0022"' in text
    assert latest_update(p.name for p in tmp_path.iterdir()) == latest_update([path.name])


def test_create_migration_in_empty_directory(tmp_path):
    path = create_migration(tmp_path)
    assert path.name == "update0000_update0001.py"
    assert path.exists()


def test_created_files_keep_advancing(tmp_path):
    first = create_migration(tmp_path)
    second = create_migration(tmp_path)
    assert latest_update([second.name]) == latest_update([first.name]) + 1


def test_create_migration_missing_directory(tmp_path):
    with pytest.raises(FileNotFoundError):
        create_migration(tmp_path / "absent")


def test_main_reports_created_file(tmp_path, capsys):
    assert main([str(tmp_path)]) == 0
    out = capsys.readouterr().out
    assert out.startswith("Created new migration file: ")
    assert str(tmp_path) in out


def test_main_fails_for_missing_directory(tmp_path, capsys):
    assert main([str(tmp_path / "absent")]) == 1
    assert capsys.readouterr().err
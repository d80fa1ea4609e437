import json
from pathlib import Path
from types import SimpleNamespace
from typing import Any, cast

from conftest import write_workshop

from workshopkit.errors import ExerciseInitError, MissingEntryFileError, NotAWorkshopperError
from workshopkit.i18n import Translator
from workshopkit.loader import ExerciseLoader, id_from_name, load_menu

NAMES = ["Hello World", "Baby Steps", "My First I/O!"]


def _loader(tmp_path: Path, names: list[str] | None = None) -> ExerciseLoader:
    names = names or NAMES
    app_dir = write_workshop(tmp_path, names)
    return ExerciseLoader(names, app_dir / "exercises", Translator("learnyou"))


def _workshop() -> Any:
    return cast(Any, SimpleNamespace(lang="en"))


def test_id_from_name() -> None:
    assert id_from_name("Hello World") == "hello_world"
    assert id_from_name("My First I/O!") == "my_first_io"
    assert id_from_name("tabs\tand  spaces") == "tabs_and__spaces"


def test_load_menu_skips_comments_and_blank_entries(tmp_path: Path) -> None:
    menu = tmp_path / "menu.json"
    menu.write_text(json.dumps(["one", "// disabled", " two ", ""]), encoding="utf-8")
    assert load_menu(menu) == ["one", "two"]


def test_load_menu_rejects_duplicates_ignoring_case(tmp_path: Path) -> None:
    menu = tmp_path / "menu.json"
    menu.write_text(json.dumps(["Hello", "HELLO"]), encoding="utf-8")
    try:
        load_menu(menu)
        raise AssertionError("Expected ValueError for duplicate exercise names.")
    except ValueError as exc:
        assert "Duplicate exercise name" in str(exc)


def test_load_menu_rejects_non_list(tmp_path: Path) -> None:
    menu = tmp_path / "menu.json"
    menu.write_text(json.dumps({"exercises": []}), encoding="utf-8")
    try:
        load_menu(menu)
        raise AssertionError("Expected ValueError for non-array menu.")
    except ValueError as exc:
        assert "JSON array" in str(exc)


def test_get_exercise_meta_is_case_insensitive_and_trims(tmp_path: Path) -> None:
    loader = _loader(tmp_path)
    meta = loader.get_exercise_meta("  BABY steps ")
    assert meta is not None
    assert meta.name == "Baby Steps"
    assert meta.number == 2
    assert meta.id == "baby_steps"
    assert meta.directory == loader.exercise_dir / "baby_steps"
    assert meta.exercise_file == meta.directory / "exercise.py"
    assert loader.get_exercise_meta("hello world") == loader.get_exercise_meta("HELLO WORLD")


def test_get_exercise_meta_unknown_name(tmp_path: Path) -> None:
    assert _loader(tmp_path).get_exercise_meta("doesnotexist") is None


def test_load_exercise_unknown_name_returns_none(tmp_path: Path) -> None:
    assert _loader(tmp_path).load_exercise("doesnotexist", _workshop()) is None


def test_load_exercise_initializes_metadata(tmp_path: Path) -> None:
    loader = _loader(tmp_path)
    workshop = _workshop()
    exercise = cast(Any, loader.load_exercise("my first i/o!", workshop))
    assert exercise is not None
    assert exercise.workshop is workshop
    assert exercise.id == "my_first_io"
    assert exercise.name == "My First I/O!"
    assert exercise.number == 3
    assert exercise.directory == loader.exercise_dir / "my_first_io"


def test_load_exercise_returns_fresh_instance_each_call(tmp_path: Path) -> None:
    loader = _loader(tmp_path)
    first = loader.load_exercise("Hello World", _workshop())
    second = loader.load_exercise("Hello World", _workshop())
    assert first is not None and second is not None
    assert first is not second
    assert type(first) is not type(second)


def test_load_exercise_missing_entry_file(tmp_path: Path) -> None:
    loader = _loader(tmp_path)
    (loader.exercise_dir / "hello_world" / "exercise.py").unlink()
    try:
        loader.load_exercise("Hello World", _workshop())
        raise AssertionError("Expected MissingEntryFileError.")
    except MissingEntryFileError as exc:
        assert "exercise.py does not exist" in str(exc)


def test_load_exercise_entry_that_is_a_directory(tmp_path: Path) -> None:
    loader = _loader(tmp_path)
    entry = loader.exercise_dir / "hello_world" / "exercise.py"
    entry.unlink()
    entry.mkdir()
    try:
        loader.load_exercise("Hello World", _workshop())
        raise AssertionError("Expected MissingEntryFileError for directory entry.")
    except MissingEntryFileError:
        pass


def test_load_exercise_without_init_is_not_a_workshopper(tmp_path: Path) -> None:
    loader = _loader(tmp_path)
    (loader.exercise_dir / "hello_world" / "exercise.py").write_text("VALUE = 1\n", encoding="utf-8")
    try:
        loader.load_exercise("Hello World", _workshop())
        raise AssertionError("Expected NotAWorkshopperError.")
    except NotAWorkshopperError as exc:
        assert "is not a workshop exercise" in str(exc)


def test_load_exercise_import_failure_is_not_a_workshopper(tmp_path: Path) -> None:
    loader = _loader(tmp_path)
    (loader.exercise_dir / "hello_world" / "exercise.py").write_text("raise ImportError('nope')\n", encoding="utf-8")
    try:
        loader.load_exercise("Hello World", _workshop())
        raise AssertionError("Expected NotAWorkshopperError for broken module.")
    except NotAWorkshopperError as exc:
        assert isinstance(exc.__cause__, ImportError)


def test_load_exercise_accepts_module_level_capabilities(tmp_path: Path) -> None:
    loader = _loader(tmp_path)
    source = (
        "state = {}\n"
        "def init(workshop, id, name, directory, number):\n"
        "    state.update(id=id, number=number)\n"
    )
    (loader.exercise_dir / "baby_steps" / "exercise.py").write_text(source, encoding="utf-8")
    exercise = cast(Any, loader.load_exercise("Baby Steps", _workshop()))
    assert exercise.state == {"id": "baby_steps", "number": 2}


def test_load_exercise_uses_factory(tmp_path: Path) -> None:
    loader = _loader(tmp_path)
    source = (
        "from workshopkit import BaseExercise\n"
        "def create_exercise():\n"
        "    exercise = BaseExercise()\n"
        "    exercise.made_by_factory = True\n"
        "    return exercise\n"
    )
    (loader.exercise_dir / "baby_steps" / "exercise.py").write_text(source, encoding="utf-8")
    exercise = cast(Any, loader.load_exercise("Baby Steps", _workshop()))
    assert exercise.made_by_factory is True
    assert exercise.name == "Baby Steps"


def test_load_exercise_wraps_init_failure(tmp_path: Path) -> None:
    loader = _loader(tmp_path)
    source = "def init(workshop, id, name, directory, number):\n    raise RuntimeError('no fixtures')\n"
    (loader.exercise_dir / "baby_steps" / "exercise.py").write_text(source, encoding="utf-8")
    try:
        loader.load_exercise("Baby Steps", _workshop())
        raise AssertionError("Expected ExerciseInitError when init raises.")
    except ExerciseInitError as exc:
        assert str(exc) == "Error initializing Baby Steps: no fixtures"
        assert isinstance(exc.__cause__, RuntimeError)

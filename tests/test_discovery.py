from dirrouter.domain.models import SourceUnit
from dirrouter.repo.discovery import discover_candidates
from dirrouter.syntax.model import TypeSyntax, UnitSyntax


def unit(path: str, *type_names: str) -> SourceUnit:
    return SourceUnit(
        file_path=path,
        syntax=UnitSyntax(file_scoped_namespace="N", types=tuple(TypeSyntax(name=n) for n in type_names)),
    )


def test_discovery_filters_on_type_name_and_folder():
    units = [
        unit("Routes/Endpoints.cs", "Endpoints"),
        unit("Routes/NameService.cs", "NameService"),
        unit("Controllers/Endpoints.cs", "Endpoints"),
        unit("Routes/Drivers/Endpoints.cs", "Helper", "Endpoints"),
    ]
    found = discover_candidates(units)
    assert [c.file_path for c in found] == ["Routes/Endpoints.cs", "Routes/Drivers/Endpoints.cs"]
    assert all(c.type.name == "Endpoints" for c in found)


def test_discovery_is_stable_and_pure():
    units = [unit("Routes/B/Endpoints.cs", "Endpoints"), unit("Routes/A/Endpoints.cs", "Endpoints")]
    first = discover_candidates(units)
    second = discover_candidates(units)
    assert first == second
    assert [c.file_path for c in first] == ["Routes/B/Endpoints.cs", "Routes/A/Endpoints.cs"]


def test_discovery_does_not_treat_file_name_as_folder():
    assert discover_candidates([unit("src/Routes", "Endpoints")]) == []

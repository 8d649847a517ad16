import textwrap

from dirrouter.syntax.csharp import parse_csharp_source

PRIMARY_CTOR_SRC = textwrap.dedent(
    """\
    using System.Text.Json;
    using Microsoft.AspNetCore.Authorization;
    using Microsoft.AspNetCore.Mvc;

    namespace DirRouter.Web.Routes.Drivers._driverId_;

    [Authorize(Roles = "Manager")]
    public class Endpoints(IConfiguration config, INameService nameService)
    {
        public async Task<IResult> Get(string driverId, [FromQuery] int? age)
        {
            await Task.CompletedTask;
            return Results.Ok(driverId);
        }

        [Authorize(Roles = "Admin")]
        public async Task<IResult> Post([FromBody] object request)
        {
            await Task.CompletedTask;
            return Results.Ok(JsonSerializer.Serialize(request));
        }
    }
    """
)

TRADITIONAL_CTOR_SRC = textwrap.dedent(
    """\
    using Microsoft.AspNetCore.Mvc;

    namespace DirRouter.Web.Routes.Drivers
    {
        public class Endpoints
        {
            private readonly IConfiguration _config;

            public Endpoints(IConfiguration config)
            {
                _config = config;
            }

            public async Task<IResult> Get([FromQuery] int? age) => Results.Ok(age);

            private async Task<string> GetResponse() => await Task.FromResult("x");
        }
    }
    """
)


def test_parse_file_scoped_namespace_and_primary_constructor():
    unit = parse_csharp_source(PRIMARY_CTOR_SRC)

    assert unit.imports == (
        "using System.Text.Json;",
        "using Microsoft.AspNetCore.Authorization;",
        "using Microsoft.AspNetCore.Mvc;",
    )
    assert unit.file_scoped_namespace == "DirRouter.Web.Routes.Drivers._driverId_"
    assert unit.block_namespace is None

    [t] = unit.types
    assert t.name == "Endpoints"
    assert t.annotations == ('[Authorize(Roles = "Manager")]',)
    assert t.primary_parameters is not None
    assert [p.raw for p in t.primary_parameters] == ["IConfiguration config", "INameService nameService"]

    get, post = t.members
    assert get.kind == "method"
    assert get.name == "Get"
    assert get.modifiers == ("public", "async")
    assert get.return_type == "Task<IResult>"
    assert get.parameter_list == "(string driverId, [FromQuery] int? age)"
    assert [p.name for p in get.parameters] == ["driverId", "age"]
    assert get.parameters[1].annotations == ("[FromQuery]",)
    assert get.body.startswith("{") and get.body.endswith("}")
    assert "return Results.Ok(driverId);" in get.body

    assert post.annotations == ('[Authorize(Roles = "Admin")]',)
    assert post.parameters[0].name == "request"
    assert post.parameters[0].annotations == ("[FromBody]",)


def test_parse_block_namespace_and_traditional_constructor():
    unit = parse_csharp_source(TRADITIONAL_CTOR_SRC)

    assert unit.file_scoped_namespace is None
    assert unit.block_namespace == "DirRouter.Web.Routes.Drivers"

    [t] = unit.types
    assert t.primary_parameters is None
    assert [m.kind for m in t.members] == ["other", "constructor", "method", "method"]

    field, ctor, get, helper = t.members
    assert field.raw_text == "private readonly IConfiguration _config;"
    assert ctor.name == "Endpoints"
    assert ctor.raw_text.startswith("public Endpoints(IConfiguration config)")
    assert [p.raw for p in ctor.parameters] == ["IConfiguration config"]
    assert get.body == "=> Results.Ok(age);"
    assert helper.name == "GetResponse"


def test_parse_without_namespace():
    unit = parse_csharp_source("public class Endpoints { }")
    assert unit.file_scoped_namespace is None
    assert unit.block_namespace is None
    assert [t.name for t in unit.types] == ["Endpoints"]

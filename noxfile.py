import inspect

import nox

nox.needs_version = ">=2024.4.15"
nox.options.default_venv_backend = "uv|virtualenv"


@nox.session
@nox.parametrize("editable", [True, False])
def tests(session: nox.Session, editable: bool) -> None:
    session.install("-e.[test]" if editable else ".[test]")
    session.run("pytest", "--cov", "python_formdata", "tests", *session.posargs)


@nox.session
def public_api(session: nox.Session) -> None:
    session.install(".")
    res = session.run(
        "python",
        "-c",
        inspect.cleandoc("""
        import python_formdata

        print(sorted(python_formdata.__all__))
        print(python_formdata.Decoder())
    """),
        silent=True,
    )
    assert "Decoder(tag_name='formdata')" in res
    assert "'unmarshal'" in res

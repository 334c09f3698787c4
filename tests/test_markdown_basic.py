from upgrade_guide.rendering.markdown import render_md
from upgrade_guide.utils import format_version


def test_format_version():
    assert format_version(22.0) == "22"
    assert format_version(22) == "22"
    assert format_version(21.7) == "21.7"
    assert format_version("21.10") == "21.1"


def test_render_steps_with_details():
    response = {
        "steps": [
            {
                "instruction": "Update Next.js to 22",
                "detailedDescription": "npm install next@^22",
                "from": 21.7,
                "to": 22.0,
                "stepType": "package-update",
            },
            {
                "instruction": "Update next.config.js configuration",
                "detailedDescription": "",
                "from": 21.8,
                "to": 21.9,
                "stepType": "configuration",
                "affectedFile": "next.config.js",
            },
            {"instruction": "Read notes", "detailedDescription": "", "from": 21.7, "to": 21.8},
        ],
        "hasPath": True,
    }
    md = render_md(response, "Next.JS", 21.7, 22.0)
    assert md.startswith("# Next.JS upgrade: 21.7 → 22\n")
    assert "## 1. Update Next.js to 22" in md
    assert "_Package Update · 21.7 → 22_" in md
    assert "npm install next@^22" in md
    assert "_Configuration · 21.8 → 21.9 · `next.config.js`_" in md
    assert "_21.7 → 21.8_" in md
    assert "⚠️" not in md


def test_render_warning():
    response = {"steps": [], "hasPath": False, "warning": "No upgrade steps found."}
    md = render_md(response, "Angular", 1, 2, {"show_details": False})
    assert "> ⚠️ No upgrade steps found." in md
    assert "## " not in md

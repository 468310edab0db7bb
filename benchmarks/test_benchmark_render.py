"""Rendering and compile benchmarks: xtmpl vs Jinja2.

Templates are inline with identical logic in both syntaxes.

Template sizes:
- "minimal": Single variable interpolation
- "small": Loop over 10 dict items with an inline helper (upper)
- "medium": Conditional + nested object + loop over 5 posts with nested loop
- "large": 100 x 10 nested loop

Run with: pytest benchmarks/test_benchmark_render.py --benchmark-only
"""

from __future__ import annotations

import pytest
from jinja2 import Environment as Jinja2Environment
from pytest_benchmark.fixture import BenchmarkFixture

from xtmpl import Environment as XtmplEnvironment

MINIMAL_XTMPL = "Hello {{name}}!"
MINIMAL_JINJA2 = "Hello {{ name }}!"

SMALL_XTMPL = "{{#for items}}<li>{{upper name}}</li>{{/for}}"
SMALL_JINJA2 = "{% for item in items %}<li>{{ item.name | upper }}</li>{% endfor %}"

MEDIUM_XTMPL = """\
{{#if user.admin}}<b>{{user.name}}</b>{{#else}}{{user.name}}{{/if}}
{{#for posts}}<h2>{{title}}</h2>{{#if draft}}(draft){{/if}}
{{#for tags}}<span>{{this}}</span>{{/for}}
{{/for}}"""
MEDIUM_JINJA2 = """\
{% if user.admin %}<b>{{ user.name }}</b>{% else %}{{ user.name }}{% endif %}
{% for post in posts %}<h2>{{ post.title }}</h2>{% if post.draft %}(draft){% endif %}
{% for tag in post.tags %}<span>{{ tag }}</span>{% endfor %}
{% endfor %}"""

LARGE_XTMPL = "{{#for rows}}<tr id={{id}}>{{#for cells}}<td>{{this}}</td>{{/for}}</tr>{{/for}}"
LARGE_JINJA2 = (
    "{% for row in rows %}<tr id={{ row.id }}>"
    "{% for cell in row.cells %}<td>{{ cell }}</td>{% endfor %}</tr>{% endfor %}"
)


@pytest.mark.benchmark(group="render:minimal")
def test_render_minimal_xtmpl(benchmark: BenchmarkFixture, xtmpl_env: XtmplEnvironment) -> None:
    template = xtmpl_env.compile(MINIMAL_XTMPL)
    benchmark(template, {"name": "Benchmark"})


@pytest.mark.benchmark(group="render:minimal")
def test_render_minimal_jinja2(benchmark: BenchmarkFixture, jinja2_env: Jinja2Environment) -> None:
    template = jinja2_env.from_string(MINIMAL_JINJA2)
    benchmark(template.render, name="Benchmark")


@pytest.mark.benchmark(group="render:small")
def test_render_small_xtmpl(
    benchmark: BenchmarkFixture,
    xtmpl_env: XtmplEnvironment,
    small_context: dict[str, object],
) -> None:
    template = xtmpl_env.compile(SMALL_XTMPL)
    benchmark(template, small_context)


@pytest.mark.benchmark(group="render:small")
def test_render_small_jinja2(
    benchmark: BenchmarkFixture,
    jinja2_env: Jinja2Environment,
    small_context: dict[str, object],
) -> None:
    template = jinja2_env.from_string(SMALL_JINJA2)
    benchmark(template.render, **small_context)


@pytest.mark.benchmark(group="render:medium")
def test_render_medium_xtmpl(
    benchmark: BenchmarkFixture,
    xtmpl_env: XtmplEnvironment,
    medium_context: dict[str, object],
) -> None:
    template = xtmpl_env.compile(MEDIUM_XTMPL)
    benchmark(template, medium_context)


@pytest.mark.benchmark(group="render:medium")
def test_render_medium_jinja2(
    benchmark: BenchmarkFixture,
    jinja2_env: Jinja2Environment,
    medium_context: dict[str, object],
) -> None:
    template = jinja2_env.from_string(MEDIUM_JINJA2)
    benchmark(template.render, **medium_context)


@pytest.mark.benchmark(group="render:large")
def test_render_large_xtmpl(
    benchmark: BenchmarkFixture,
    xtmpl_env: XtmplEnvironment,
    large_context: dict[str, object],
) -> None:
    template = xtmpl_env.compile(LARGE_XTMPL)
    benchmark(template, large_context)


@pytest.mark.benchmark(group="render:large")
def test_render_large_jinja2(
    benchmark: BenchmarkFixture,
    jinja2_env: Jinja2Environment,
    large_context: dict[str, object],
) -> None:
    template = jinja2_env.from_string(LARGE_JINJA2)
    benchmark(template.render, **large_context)


@pytest.mark.benchmark(group="compile:medium")
def test_compile_medium_xtmpl(benchmark: BenchmarkFixture, xtmpl_env: XtmplEnvironment) -> None:
    benchmark(xtmpl_env.compile, MEDIUM_XTMPL)


@pytest.mark.benchmark(group="compile:medium")
def test_compile_medium_jinja2(benchmark: BenchmarkFixture, jinja2_env: Jinja2Environment) -> None:
    benchmark(jinja2_env.from_string, MEDIUM_JINJA2)

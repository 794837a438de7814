from __future__ import annotations
from typing import Mapping, Sequence
from jinja2 import Template

from ..models import ScenarioResult


def render_report(template_str: str, **kwargs) -> str:
    tpl = Template(template_str, trim_blocks=True, lstrip_blocks=True)
    return tpl.render(**kwargs)


def render_estimate(
    *,
    region: str,
    living_space: float,
    rooms: float,
    predicted_rent: int,
    multiplier: float,
    impacts: Mapping[str, int],
    scenarios: Sequence[ScenarioResult],
    n_records: int,
    coefficient_set: str,
) -> str:
    return render_report(
        TEMPLATE_ESTIMATE,
        region=region,
        living_space=living_space,
        rooms=rooms,
        predicted_rent=predicted_rent,
        multiplier=multiplier,
        impacts=impacts,
        scenarios=scenarios,
        n_records=n_records,
        coefficient_set=coefficient_set,
    )


TEMPLATE_ESTIMATE = """\
Mietpreis-Schätzung – {{ region }}

Wohnfläche: {{ living_space }} m², Zimmer: {{ rooms }}
Geschätzte Gesamtmiete: {{ predicted_rent }} €
Regionsfaktor: {{ "%.3f"|format(multiplier) }} (Koeffizienten: {{ coefficient_set }}, {{ n_records }} Inserate)

Ø Einfluss der Ausstattung (Modell):
{% for name, value in impacts.items() %}
  - {{ name }}: {{ "%+d"|format(value) }} €
{% endfor %}

Szenarien (geglättet):
{% for s in scenarios %}
  - {{ s.name }}: {{ s.predicted_rent }} €
{% endfor %}
"""

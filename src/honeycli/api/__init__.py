"""The generic request pipeline behind ``honeycli api``.

* :mod:`~honeycli.api.fields` -- ``key=value`` field encoding.
* :mod:`~honeycli.api.jsonapi` -- v2 detection and JSON:API wrap/unwrap.
* :mod:`~honeycli.api.request` -- request building and ``Link`` pagination.
* :mod:`~honeycli.api.filter` -- jq filtering of response bodies.
* :mod:`~honeycli.api.runner` -- the orchestrator tying them together.
"""

# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Molt Hotel — a tick-driven simulation of agents living in a hotel.

Venue graph, access rules and routes live in ``molthotel.venue``; the tick
loop, movement and scheduling in ``molthotel.simulation``.
"""

__version__ = "0.1.0"

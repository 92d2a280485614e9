# -*- coding: utf-8 -*-
"""HealthGlow — personal health tracking backend.

Each domain (profile, food, hrv, appointments, documents, conversations) ships
its own `models.py` + `api.py`; persistence for all of them goes through
`healthglow.storage.Storage`.
"""

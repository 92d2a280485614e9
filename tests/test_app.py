# -*- coding: utf-8 -*-

from __future__ import annotations

import os
import unittest
from unittest import mock

import healthglow.api as api_module


class TestAppFactory(unittest.TestCase):
    def test_import_builds_no_app(self) -> None:
        self.assertFalse(hasattr(api_module, "app"))

    def test_run_serves_the_factory(self) -> None:
        env = {"HEALTHGLOW_HOST": "0.0.0.0", "HEALTHGLOW_PORT": "9001"}
        with mock.patch.dict(os.environ, env), mock.patch("uvicorn.run") as uvicorn_run:
            api_module.run()
        uvicorn_run.assert_called_once_with(
            "healthglow.api:create_app", factory=True, host="0.0.0.0", port=9001, reload=False
        )


if __name__ == "__main__":
    unittest.main()

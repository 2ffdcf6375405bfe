# -*- coding: utf-8 -*-
"""The version of visionlink."""

__version__ = "0.1.0"

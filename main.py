#!/usr/bin/env python3
"""
Tallgrass - creature battle core

Thin wrapper around the developer CLI in :mod:`tallgrass.cli`.

To run: python main.py simulate --seed 7
"""

from tallgrass.cli import run

if __name__ == "__main__":
    run()

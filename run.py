#!/usr/bin/env python3
"""Convenience script to run the signed URL verification server."""

import asyncio

from url_signer.server import run_server


def main():
    asyncio.run(run_server())

if __name__ == "__main__":
    main()

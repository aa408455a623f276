"""
Astroport IBC deployment tooling.

Uploads and instantiates the cw20-ics20, IBC controller and satellite
contracts, recording their addresses per chain so reruns resume where the
previous run stopped.
"""

__version__ = "0.1.0"

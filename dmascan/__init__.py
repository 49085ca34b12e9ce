"""DMA Scan - Point-in-time detector for DMA-capable and cheat-assist devices."""

__version__ = "0.1.0"

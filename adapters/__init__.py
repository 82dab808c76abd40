"""Write adapters: protocol descriptors, token metadata, and unsigned transaction params per (protocol, product, chain)."""

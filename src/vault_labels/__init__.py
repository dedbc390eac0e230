"""vault_labels: integrity tooling for per-chain vault label datasets.

The package loads the entities, vaults, products, points and opportunities
documents kept under numeric chain directories, checks them for referential
and formatting problems, and rewrites addresses into their EIP-55 checksum
form.
"""

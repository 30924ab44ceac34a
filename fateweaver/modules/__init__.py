"""
Fateweaver resolution modules.

Each subpackage owns one part of a resolution:

- shared: constants, formulas, coercion, exceptions, random source
- elixir: elixir catalog and buff consumption rules
- buff: per-call buff pipeline
- boost: plug-in payloads for external boosts
- loot: rarity weights and weighted pools
- encounter: tier tables and monster selection
- resolution: final value resolver
- flee: flee resolver

Subpackages are imported explicitly; nothing is loaded here.
"""

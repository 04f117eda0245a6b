"""
PromptCraft - prompt construction package.

This package contains:
- tokens: placeholder dictionary and the bracket-token resolver.
- prompt_builder: prompt validation, rule-based enhancement, and the fluent builder.
- config_service: JSON/YAML configuration for enhancement and builder defaults.
"""

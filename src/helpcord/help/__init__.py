"""Help forum tagging, helper glue and activity updates."""

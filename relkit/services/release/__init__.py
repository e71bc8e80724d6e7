"""Release cutting: validation, checkout, build, notes, tag and publish."""

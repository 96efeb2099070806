"""Update pipeline: indices, archives, merging and pin rewriting."""

"""Article corpus of front-matter markdown documents.

Layout:
    articles/
    ├── event-sourcing-basics.md      # YAML front matter + markdown body
    ├── form-objects.md
    └── 2014/                          # subdirectories are scanned too
        └── service-objects.md

Front matter:
    ---
    title: "Service objects as a way of testing Rails apps"
    created_at: 2014-11-26 11:59:41 +0100
    publish: true
    author: Jane Doe
    tags: [ 'rails', 'service objects' ]
    newsletter: rails_refactoring
    ---

Everything before the `<!-- more -->` marker is the teaser.
"""

"""
patternenforcer.templates - Jinja2 Scaffolding Templates
========================================================

Templates rendered by :mod:`patternenforcer.generator`. Each ``.j2`` file
renders to one React/TypeScript source file.

Layout
------
component/:
    - component.tsx.j2: The component, shaped by its type
    - test.tsx.j2: Testing Library tests
    - module.css.j2: CSS module
    - index.ts.j2: Barrel export
    - stories.tsx.j2: Storybook stories (optional)
    - README.md.j2: Component documentation (optional)

feature/:
    - index.ts.j2, README.md.j2: Always rendered
    - types.ts.j2, types_index.ts.j2: Always rendered
    - api.ts.j2, api_index.ts.j2
    - store.tsx.j2, store_index.ts.j2
    - hooks.ts.j2, hooks_index.ts.j2
    - view.tsx.j2, view.module.css.j2, components_index.ts.j2
    - test.tsx.j2

Template Context
----------------
Component templates receive ``name``, ``kebab_name``, ``component_type``
(a :class:`~patternenforcer.generator.ComponentType`), ``storybook`` and
``date``. Feature templates receive ``name``, ``pascal_name``,
``camel_name``, ``kebab_name`` and ``parts`` (the enabled optional parts).
The ``kebab_case``, ``camel_case`` and ``pascal_case`` filters are
available in both.
"""

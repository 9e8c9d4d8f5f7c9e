"""Shared help text for the init command."""

INIT_COMMAND_DOC = """
Create a new project from a template package and its toolchain.

The project directory is created if needed. It must not contain files that
could conflict with the generated project (README.md, LICENSE, docs/, VCS
and IDE metadata are fine).

What Happens:
- A package.json is written to the project directory
- The template package is installed with npm (or yarn with --use-yarn)
- The toolchain named in the template's template.json is installed
- The toolchain's scripts/init.js finishes the setup

A value for --template can be one of:
- a template published as '[@scope-name/][tjs-template-]template-name':
    tjs-template-my-project-template, or for the same template
    my-project-template
    @my-scope/tjs-template-my-project-template, or for the same template
    @my-scope/my-project-template
- a scope alone, for the scope's default template: @my-scope
- any of the above with a version or tag: my-project-template@next
- a local path relative to the current working directory:
    file:../tjs-template-my-app-template
- a .tgz or .tar.gz archive:
    https://mysite.com/tjs-template-my-app-template-0.1.0.tgz

Examples:
  create-toolchain init my-project --template rollup-library
  create-toolchain init my-project -t @my-scope --use-yarn
  create-toolchain init my-project -t file:../my-template --verbose
  create-toolchain init --info

Run 'create-toolchain resolve <template>' to see what a template value installs.
"""

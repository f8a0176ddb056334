"""
Publishing layer — writes re-hosted images into the content store.

Submodules:
  github_store — GitHub contents API create-or-update + public raw URLs

Credential placement (.env, gitignored):
  GITHUB_TOKEN   — token with contents write access
  GITHUB_USER    — repository owner
  REPO_NAME      — repository name
  BRANCH         — target branch (default: main)
"""

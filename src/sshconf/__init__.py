"""sshconf - structured editor for OpenSSH client config files."""

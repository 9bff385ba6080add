"""gpgtext-specific parts"""

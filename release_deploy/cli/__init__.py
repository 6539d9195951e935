"""Command line interface for release-deploy"""

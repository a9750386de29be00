"""This module contains the command line interface of omeroclient."""

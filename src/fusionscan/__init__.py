"""
identifies candidate gene fusions from chimeric junction reads and discordant read pairs
"""
__version__ = '1.0.0'

class AnnotationParseError(Exception):
    """
    raised when a gene model record cannot be used, for example an exon without a gene or
    transcript id
    """

    pass


class ChimericJunctionParseError(Exception):
    pass


class ReadPairingError(Exception):
    """
    raised when the mate of a read cannot be determined from its name
    """

    pass


class ConfigurationError(Exception):
    pass

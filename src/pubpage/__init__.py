"""Publication list rendering for a BibTeX-driven academic homepage."""

import logging

# Install a NullHandler to avoid emitting logs unless the application configures logging
logging.getLogger(__name__).addHandler(logging.NullHandler())

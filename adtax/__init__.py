"""Ad creative file name taxonomy service."""

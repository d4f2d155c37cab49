"""Wire codecs for the SimpleJSON protocol."""

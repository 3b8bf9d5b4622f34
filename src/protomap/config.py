"""Default configuration settings for the protomap tool."""

DEFAULT_CONFIG = {
	# Project enumeration
	"project": {
		# Suffix that marks a source entity and turns a bare type name into a file name
		"source_suffix": ".js",
		# Extensions (without dot) listed by the resource view
		"resource_extensions": ["jpg", "gif", "jpeg", "png"],
		# Glob patterns skipped while walking the project directory
		"ignored_patterns": [
			"**/node_modules/**",
			"**/__pycache__/**",
			"**/dist/**",
			"**/build/**",
		],
	},
	# Pattern extraction
	"analyzer": {
		# Composed type membership check: 'loose' (substring) or 'strict' (exact name)
		"membership": "loose",
	},
	# Grid layout
	"layout": {
		"origin_x": 300,
		"origin_y": 100,
		"step_x": 150,
		"step_y": 150,
		# A column wraps once y exceeds this value
		"max_y": 400,
	},
}

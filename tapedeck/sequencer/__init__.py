"""Step sequencer clock, patterns and the synthesized drum kit."""
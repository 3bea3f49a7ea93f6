import cProfile
import pstats
import sys
import time

from retweet_influence.diffusion import CascadeModel
from retweet_influence.io import load_edge_list


def run_simulation(graph, num_influencers=5, num_steps=5, max_generations=20):
    """Runs cascades from the top influencers, one at a time and all together."""
    influencers = graph.find_influencers(num_influencers)
    model = CascadeModel(graph)
    for _ in range(num_steps):
        model.simulate_each(max_generations, influencers, 1, 1)
        model.simulate(max_generations, influencers, 1, 1)


def run_subgraphs(graph, num_influencers=5):
    """Extracts influencer subgraphs and every shortest path inside them."""
    for influencer_graph in graph.get_influencer_graphs(num_influencers):
        influencer_graph.shortest_paths()


def main():
    """Main function to run the benchmark."""
    # --- Setup ---
    edge_file = sys.argv[1] if len(sys.argv) > 1 else '../data/twitter_higgs.txt'
    G = load_edge_list(edge_file).deep_copy()

    # --- Profiling ---
    profiler = cProfile.Profile()
    profiler.enable()

    run_subgraphs(G)
    run_simulation(G, num_steps=5)

    profiler.disable()

    # --- Save and Print Stats ---
    stats_file = f"profile_{time.time()}.prof"
    profiler.dump_stats(stats_file)

    print("--- cProfile Stats ---")
    p = pstats.Stats(stats_file)
    p.sort_stats("cumulative").print_stats(20)

    print(f"\nProfiling data saved to '{stats_file}'.")
    print("To visualize with snakeviz, run the following command in your terminal:")
    print(f"snakeviz {stats_file}")

if __name__ == "__main__":
    main()
